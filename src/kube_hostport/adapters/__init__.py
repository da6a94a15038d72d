from . import gcloud, kubectl

__all__ = ["gcloud", "kubectl"]
