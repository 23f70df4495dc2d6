"""Directory adapters for cases and departments"""

from .sql_directory import SqlCaseDirectory, SqlDepartmentDirectory

__all__ = ["SqlCaseDirectory", "SqlDepartmentDirectory"]
