from filegen.session import GenerationParameters, GenerationSession, ProgressSnapshot

__version__ = "0.1.0"

__all__ = ["GenerationParameters", "GenerationSession", "ProgressSnapshot", "__version__"]
