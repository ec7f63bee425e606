"""Usage data: status input, transcript metrics and activity blocks."""
