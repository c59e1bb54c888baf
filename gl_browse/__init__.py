"""
gl-browse: open GitLab pages for the repository you are working in.

Resolves which GitLab server and project the current clone belongs to, keeps
per-server private tokens and preferred domains in a small YAML file, and turns
short references (#12, !3, p, a file path) into web URLs to open in a browser.

Environment:
    GL_BROWSE_CONFIG - Credential store path (default: ~/.gl-browse.yml)
"""

from gl_browse.cli import main

__version__ = "0.1.0"
__all__ = ["main", "__version__"]
