"""Map repository files to the bug-fix pull requests that touched them."""
