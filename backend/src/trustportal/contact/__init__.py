"""Public contact form - creates support tickets."""
