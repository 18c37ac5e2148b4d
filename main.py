# main.py
from lrta_sim.app.build import build
from lrta_sim.app.session import start_run
from lrta_sim.domain.entities.geography import MapNode, MapWay, Position


def demo_map(rows: int = 4, cols: int = 5, spacing_deg: float = 0.001):
    """Small street grid near Ulm; the last column is a northbound oneway."""
    nodes, ways = [], []

    def nid(r, c):
        return 1000 + r * cols + c

    for r in range(rows):
        for c in range(cols):
            nodes.append(MapNode(nid(r, c), 48.398 + r * spacing_deg, 9.99 + c * spacing_deg))
    wid = 1
    for r in range(rows):
        ways.append(MapWay(wid, tuple(nid(r, c) for c in range(cols)), {"highway": "residential"}))
        wid += 1
    for c in range(cols):
        tags = {"highway": "residential"}
        if c == cols - 1:
            tags["oneway"] = "yes"
        ways.append(MapWay(wid, tuple(nid(r, c) for r in range(rows)), tags))
        wid += 1
    # a footpath shortcut, only usable with way_selection "any"
    ways.append(MapWay(wid, (nid(0, 0), nid(rows - 1, cols - 1)), {"highway": "footway"}))
    return nodes, ways


def run():
    nodes, ways = demo_map()
    cfg = {
        "name": "demo",
        "run_id": "demo-1",
        "map": {"way_selection": "car", "metric": "haversine", "max_resolve_distance": 0.5},
        "heuristic": {"kind": "straight_line"},
        "sim": {"step_delay_s": 0.05},
        "track": {"echo_jsonl": True},
    }
    app = build(cfg, nodes, ways)
    markers = [Position(48.3981, 9.9901), Position(48.4009, 9.9939)]

    handle = start_run(app, markers)
    outcome = handle.join(timeout=30.0)
    if outcome is None:
        handle.cancel()
        outcome = handle.join()
    app.flush_tracks(timeout=1.0)
    print(outcome.message)
    print(f"track points: {len(app.tracks.track(app.config.track.name))}")
    app.close()


if __name__ == "__main__":
    run()
