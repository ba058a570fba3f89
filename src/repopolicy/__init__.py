"""repopolicy - lint a repository against a declarative ruleset."""

__version__ = "0.1.0"
