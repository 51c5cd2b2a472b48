"""ctxscan: project classification and relevance search for LLM context."""

from .config import ConfigError, CtxScanConfig, load_config
from .context import ContextBuilder, extract_keywords
from .models import ProjectStructure, ProjectType
from .parsers import CodeParser, extract_structure
from .project_analyzer import ProjectAnalyzer
from .search import CodeSearch, InvalidPatternError

__version__ = "0.1.0"

__all__ = [
    "CodeParser",
    "CodeSearch",
    "ConfigError",
    "ContextBuilder",
    "CtxScanConfig",
    "InvalidPatternError",
    "ProjectAnalyzer",
    "ProjectStructure",
    "ProjectType",
    "extract_keywords",
    "extract_structure",
    "load_config",
]
