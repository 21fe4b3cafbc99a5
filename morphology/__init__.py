"""Word-level English morphology: verb conjugation and nominal forms."""
