"""Tool layer: MusicalTool contract, registry and tuner tools."""
