"""kubegate: Kubernetes resources <-> API gateway domain model conversion."""

__version__ = "0.1.0"

# Lazy imports to avoid loading the kubernetes client until a converter is used
__all__ = [
    "KubernetesModelConverter",
    "ConverterConfig",
    "Route",
    "Domain",
    "TlsCertificate",
    "WasmPlugin",
    "WasmPluginInstance",
    "ServiceSource",
]


def __getattr__(name):
    if name == "KubernetesModelConverter":
        from .converter import KubernetesModelConverter
        return KubernetesModelConverter
    elif name == "ConverterConfig":
        from .config import ConverterConfig
        return ConverterConfig
    elif name in ("Route", "Domain", "TlsCertificate", "WasmPlugin", "WasmPluginInstance", "ServiceSource"):
        from . import models
        return getattr(models, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
