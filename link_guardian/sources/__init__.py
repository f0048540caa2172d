from .github import RepositoryDocument, fetch_repository_document, parse_repo_url

__all__ = ["RepositoryDocument", "fetch_repository_document", "parse_repo_url"]
