"""Built-in rule, fix, and axiom plugins."""

# repopolicy:domain=plugins
