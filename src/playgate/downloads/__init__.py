"""Download-store reconciliation."""

from playgate.downloads.reconciler import DownloadReconciler, RemovalOutcome

__all__ = ["DownloadReconciler", "RemovalOutcome"]
