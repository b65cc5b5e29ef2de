"""Infrastructure layer: database engine and SQLModel repositories."""
