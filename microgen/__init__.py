"""microgen: go-kit service scaffolding generated from interface descriptions."""

__version__ = "0.6.0"

FILE_HEADER = f'This file was automatically generated by "microgen {__version__}" utility.'
