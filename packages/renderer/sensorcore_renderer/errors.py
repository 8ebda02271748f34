"""Renderer error types. All of them are per-element and never abort a frame."""

from __future__ import annotations


class RenderError(Exception):
    pass


class MissingAssetError(RenderError):
    pass


class MissingFontError(RenderError):
    pass
