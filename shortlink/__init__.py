"""Client de raccourcissement d'URL authentifié."""
