"""wedcontest plugin core."""
