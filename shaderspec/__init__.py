"""shaderspec: builtin function catalogues extracted from shading-language specs."""

__version__ = "0.1.0"
