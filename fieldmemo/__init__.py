"""Field Memo: calendar journal core (recurring time blocks, undo/redo history)."""
