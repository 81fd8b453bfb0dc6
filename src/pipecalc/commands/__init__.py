"""Click plumbing shared by the pipecalc command."""
