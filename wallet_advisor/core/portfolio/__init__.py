"""Holdings pipeline: normalize, aggregate, analyze, advise."""
