"""Format-specific framing for digest headers, trees and file sections."""

from pathlib import PurePosixPath

from .models import OutputFormat

BANNER = "=" * 64

# Fence language hints for markdown output
FENCE_LANGUAGES = {
    '.py': 'python',
    '.kt': 'kotlin',
    '.kts': 'kotlin',
    '.java': 'java',
    '.js': 'javascript',
    '.mjs': 'javascript',
    '.jsx': 'jsx',
    '.ts': 'typescript',
    '.tsx': 'tsx',
    '.go': 'go',
    '.rs': 'rust',
    '.rb': 'ruby',
    '.php': 'php',
    '.swift': 'swift',
    '.c': 'c',
    '.h': 'c',
    '.cc': 'cpp',
    '.cpp': 'cpp',
    '.hpp': 'cpp',
    '.cs': 'csharp',
    '.sh': 'bash',
    '.bash': 'bash',
    '.sql': 'sql',
    '.html': 'html',
    '.css': 'css',
    '.scss': 'scss',
    '.xml': 'xml',
    '.json': 'json',
    '.yaml': 'yaml',
    '.yml': 'yaml',
    '.toml': 'toml',
    '.md': 'markdown',
    '.gradle': 'groovy',
}


def escape_xml(text: str) -> str:
    """Escape special XML characters."""
    if not text:
        return ""
    return (text
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&apos;"))


def fence_language(path: str) -> str:
    """Markdown fence hint for a file path, or an empty string."""
    return FENCE_LANGUAGES.get(PurePosixPath(path).suffix.lower(), '')


class OutputFormatter:
    """Builds the text blocks that make up one digest part."""

    def __init__(self, output_format: OutputFormat = OutputFormat.PLAIN):
        self.output_format = OutputFormat(output_format)

    def format_header(self, project_name: str, file_count: int) -> str:
        """Header block stating the project name and the number of files."""
        if self.output_format == OutputFormat.XML:
            return (f'<project name="{escape_xml(project_name)}" files="{file_count}" />\n')
        if self.output_format == OutputFormat.MARKDOWN:
            return f"# Project Digest: {project_name}\n\n**Files:** {file_count}\n"
        return f"{BANNER}\nProject: {project_name}\nFiles: {file_count}\n{BANNER}\n"

    def format_tree(self, tree_text: str) -> str:
        """Tree block; empty when there is no tree text."""
        if not tree_text:
            return ""
        if self.output_format == OutputFormat.XML:
            return f"<directory_structure>\n{escape_xml(tree_text)}</directory_structure>\n\n"
        if self.output_format == OutputFormat.MARKDOWN:
            return f"## Directory Structure\n\n```text\n{tree_text}```\n\n"
        return f"{tree_text}\n"

    def format_file(self, path: str, content: str) -> str:
        """One file section: path marker, content, then a blank separator line."""
        if self.output_format == OutputFormat.XML:
            return f'<file path="{escape_xml(path)}">\n{content}\n</file>\n\n'
        if self.output_format == OutputFormat.MARKDOWN:
            return f"## File: {path}\n\n```{fence_language(path)}\n{content}\n```\n\n"
        return f"{BANNER}\nFile: {path}\n{BANNER}\n{content}\n\n"

    def build_preamble(self, project_name: str, file_count: int, tree_text: str) -> str:
        """Header plus tree block, written at the top of every part."""
        return self.format_header(project_name, file_count) + "\n" + self.format_tree(tree_text)
