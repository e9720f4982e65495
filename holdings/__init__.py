"""Holdings hierarchy service: shareholders, companies, projects, tables and views."""

__version__ = "1.0.0"
