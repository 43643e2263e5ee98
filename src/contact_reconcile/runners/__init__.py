from contact_reconcile.runners.reconcile import ReconcileSettings, Reconciler

__all__ = ["Reconciler", "ReconcileSettings"]
