"""Cloud Immersion - daily weather feature derivation for cloud immersion analysis."""

__version__ = "0.1.0"

from cloud_immersion.config import PipelineConfig
from cloud_immersion.compute.derived import derive_features, derive_immersion

__all__ = ["PipelineConfig", "derive_features", "derive_immersion"]
