"""Tree editing: pure mutators and the editing session that holds the current tree."""
