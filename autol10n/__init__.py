"""autol10n - LLM-assisted incremental localization of Flutter source trees."""

__version__ = "0.1.0"
