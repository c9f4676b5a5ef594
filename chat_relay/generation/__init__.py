from .http import HttpGenerationSource
from .source import GenerationSource

__all__ = ["GenerationSource", "HttpGenerationSource"]
