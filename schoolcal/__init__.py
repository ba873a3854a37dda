"""schoolcal: NEIS school academic calendar lookup."""
