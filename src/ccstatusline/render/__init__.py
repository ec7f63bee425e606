"""Status line rendering: styling, layout and width fitting."""
