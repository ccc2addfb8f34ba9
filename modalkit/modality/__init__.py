"""Modality helpers for audio and vision inputs and outputs."""
