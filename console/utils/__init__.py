"""Utility helpers shared by console components."""

from console.utils.toasts import Toast, Toaster, ToastLevel

__all__ = ["Toast", "ToastLevel", "Toaster"]
