import argparse
import json
from typing import Any, Dict, List


def _bounds_error(result) -> Dict[str, Any]:
    return {'violation': result.violation.value, 'message': result.message}


def _check_shapes(scene: Dict[str, Any], config) -> List[Dict[str, Any]]:
    from detbounds.config import build_shape
    bcheck = config.boundary_check()
    rows = []
    for i, entry in enumerate(scene.get('shapes', []) or []):
        row = {'name': entry.get('name', f"shape{i}"), 'type': entry['type']}
        result = build_shape(entry)
        if not result.ok:
            row['error'] = _bounds_error(result)
            rows.append(row)
            continue
        bounds = result.bounds
        row['values'] = bounds.values()
        row['points'] = [
            {
                'point': list(map(float, p)),
                'inside': bool(bounds.inside(p, bcheck)),
                'distance': float(bounds.distance_to_boundary(p)),
            }
            for p in entry.get('points', []) or []
        ]
        rows.append(row)
    return rows


def _check_volumes(scene: Dict[str, Any], config) -> List[Dict[str, Any]]:
    from detbounds.config import build_volume
    rows = []
    for i, entry in enumerate(scene.get('volumes', []) or []):
        row = {'name': entry.get('name', f"volume{i}"), 'type': entry['type']}
        result = build_volume(entry)
        if not result.ok:
            row['error'] = _bounds_error(result)
            rows.append(row)
            continue
        volume = result.bounds
        row['values'] = volume.values()
        row['points'] = [
            {'point': list(map(float, p)), 'inside': bool(volume.inside(p, config.tolerance0))}
            for p in entry.get('points', []) or []
        ]
        rows.append(row)
    return rows


def _vertices(scene: Dict[str, Any], segments: int) -> List[Dict[str, Any]]:
    from detbounds.config import build_shape
    rows = []
    for i, entry in enumerate(scene.get('shapes', []) or []):
        row = {'name': entry.get('name', f"shape{i}"), 'type': entry['type']}
        result = build_shape(entry)
        if result.ok:
            row['vertices'] = result.bounds.vertices(segments).tolist()
        else:
            row['error'] = _bounds_error(result)
        rows.append(row)
    return rows


def _emit(payload, out=None):
    if out:
        with open(out, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2)
    else:
        print(json.dumps(payload, indent=2))


def main(argv=None):
    parser = argparse.ArgumentParser(prog="detbounds", description="Detector bounds CLI")
    sub = parser.add_subparsers(dest="cmd")

    p_check = sub.add_parser("check", help="Evaluate points against the shapes of a YAML scene")
    p_check.add_argument("scene", help="Path to scene YAML file")
    p_check.add_argument("--out", help="Output JSON file")

    p_vert = sub.add_parser("vertices", help="Print the polygon of every shape in a YAML scene")
    p_vert.add_argument("scene", help="Path to scene YAML file")
    p_vert.add_argument("--segments", type=int, help="Segments per full turn for curved edges")
    p_vert.add_argument("--out", help="Output JSON file")

    args = parser.parse_args(argv)

    if args.cmd in ("check", "vertices"):
        from detbounds.config import CheckConfig, load_yaml
        scene = load_yaml(args.scene)
        config = CheckConfig.from_mapping(scene.get('config'))
        if args.cmd == "check":
            payload = {
                'shapes': _check_shapes(scene, config),
                'volumes': _check_volumes(scene, config),
            }
        else:
            segments = args.segments if args.segments is not None else config.segments
            payload = {'shapes': _vertices(scene, segments)}
        _emit(payload, args.out)
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
