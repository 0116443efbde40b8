"""Playgate - video identity, history migration, and playback routing.

Decides where a catalog video should play from (a locally cached copy or
network delivery), keeps the two download records in agreement, and
upgrades legacy watched-history identifiers to the URI-style scheme.
"""

__version__ = "0.4.0"
