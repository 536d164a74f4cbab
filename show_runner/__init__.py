"""Quiz show runner: game sequencing, play machines and team scoring."""
