"""Slot services: generation, pricing, inventory and retention."""
