"""
Orbital mechanics and visibility core for the satellite globe.

Turns two-line element sets into Earth-fixed positions, observer look angles,
pass predictions, coverage footprints and the sub-solar point. Everything in
here is synchronous and pure given (record, instant, observer); the only
asynchronous piece is the catalog reload in satcore.catalog.

Usage:
    from satcore.elements import parse_catalog, split_tle_text
    from satcore.passes import compute_passes

    records = parse_catalog(split_tle_text(text))
    passes = compute_passes(records[0], 40.0, -75.0, 0.0, horizon_hours=24)
"""
