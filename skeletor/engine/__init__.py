"""Apply engine: plan a tree into tasks and execute them against a target directory."""
