"""
CVSCRIPTLY - Consistent Views of a Structured CV In Print, Typeset, and Live Yield

A resume composition system that turns one structured resume record into
matching PDF, DOCX, and LaTeX exports plus a live HTML preview.

Architecture:
- Composing Context: Resume data model, style resolution, section ordering and filtering
- Rendering Context: PDF, DOCX, LaTeX and live-preview renderers, export orchestration
- Advising Context: AI-drafted summaries and ATS analysis (external, fallible)
"""

__version__ = "0.1.0"
