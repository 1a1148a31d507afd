"""Bill settlement calculations for shared restaurant receipts."""
