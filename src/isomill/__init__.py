"""Isomill - Generate PCB isolation milling toolpaths.

Isomill converts filled copper geometry into tool-center paths that isolate
every copper region from its neighbours. Each region may only grow into its
own Voronoi cell, so the tool never cuts into copper it does not own.
Multiple concentric passes, mirroring for double-sided boards, masking and
travel-optimised path ordering are supported.

Example:
    $ isomill isolate top_copper.geojson --tool-diameter 0.2 --extra-passes 1

This will create top_copper-toolpaths.json with the ordered toolpaths.
"""

__version__ = "0.1.0"
__author__ = "Isomill contributors"

__all__ = ["__author__", "__version__"]
