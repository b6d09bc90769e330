"""Templates YAML empacotados usados no bootstrap e no gateway default."""
