#!/usr/bin/env python3
"""CLI entry point for the Iris Locator application."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import cv2
import numpy as np

# Ensure the iris_locator package is importable regardless of entry location
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from iris_locator.config_manager import ConfigManager
from iris_locator.face_detector import FaceDetector
from iris_locator.iris_locator import IrisLocator
from iris_locator.region import to_grayscale
from iris_locator.types import FaceRegion

SUPPORTED_FORMATS: Tuple[str, ...] = ('.jpg', '.jpeg', '.png', '.bmp')


class IrisLocatorApp:
    """Detect faces in still images and mark the iris centres."""

    def __init__(self, config: Optional[ConfigManager] = None, face_detector=None) -> None:
        self.config = config or ConfigManager()
        self.face_detector = face_detector or FaceDetector.from_config(self.config)
        self.locator = IrisLocator(
            config=self.config.search_config(),
            face_detector=self.face_detector,
            verbose=bool(self.config.get("verbose", False)),
        )

    def process_image(self, image: np.ndarray) -> List[Dict[str, object]]:
        """Run detection and iris localisation; one entry per detected face."""
        gray = to_grayscale(image)
        faces = self.face_detector.detect_faces(
            gray, resize_factor=self.config.get("face_detector.resize_factor", 1.0)
        )
        faces = self.face_detector.filter_faces(faces, self.config.get("face_detector.min_face_size"))

        results = []
        for face, pair in self.locator.locate_irises_detailed(gray, faces):
            face = FaceRegion.from_rect(face)
            results.append({
                "face": list(face.as_rect()),
                "iris": pair.to_dict() if pair is not None else None,
            })
        return results

    def annotate_image(self, image: np.ndarray, results: List[Dict[str, object]]) -> np.ndarray:
        """Draw face boxes and iris markers on a BGR copy of ``image``."""
        if image.ndim == 2:
            frame = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        else:
            frame = image.copy()

        face_color = tuple(int(c) for c in self.config.get("drawing.face_color", [255, 237, 178]))
        left_color = tuple(int(c) for c in self.config.get("drawing.left_color", [0, 255, 0]))
        right_color = tuple(int(c) for c in self.config.get("drawing.right_color", [0, 0, 255]))
        radius = int(self.config.get("drawing.marker_radius", 3))

        for entry in results:
            x, y, w, h = entry["face"]
            cv2.rectangle(frame, (x, y), (x + w, y + h), face_color, 2)

            iris = entry["iris"]
            if not iris:
                continue
            for side, color in (("left", left_color), ("right", right_color)):
                point = iris.get(side)
                if point is not None:
                    cv2.circle(frame, (point["x"], point["y"]), radius, color, -1)

        return frame

    def process_file(self, image_path: str, output_path: Optional[str] = None) -> Optional[Dict[str, object]]:
        """Process one image file; writes an annotated copy when ``output_path`` is set."""
        image = cv2.imread(image_path)
        if image is None:
            print(f"❌ Could not load image: {image_path}", file=sys.stderr)
            return None

        results = self.process_image(image)

        if output_path:
            parent = os.path.dirname(output_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            if not cv2.imwrite(output_path, self.annotate_image(image, results)):
                print(f"❌ Could not write image: {output_path}", file=sys.stderr)

        return {"image": image_path, "faces": results}

    def process_directory(self, images_dir: str, output_dir: Optional[str] = None) -> List[Dict[str, object]]:
        """Process every supported image directly under ``images_dir``."""
        reports = []
        for image_file in sorted(os.listdir(images_dir)):
            if not image_file.lower().endswith(SUPPORTED_FORMATS):
                continue

            output_path = os.path.join(output_dir, image_file) if output_dir else None
            report = self.process_file(os.path.join(images_dir, image_file), output_path)
            if report is not None:
                reports.append(report)
        return reports


def _print_report(report: Dict[str, object]) -> None:
    faces = report["faces"]
    print(f"\n📸 {report['image']}: {len(faces)} face(s)")
    for index, entry in enumerate(faces):
        iris = entry["iris"]
        if iris is None:
            print(f"   ❌ Face {index} {tuple(entry['face'])}: no iris candidates")
            continue
        left = iris["left"]
        right = iris["right"]
        left_text = f"({left['x']}, {left['y']})" if left else "-"
        right_text = f"({right['x']}, {right['y']})" if right else "-"
        print(f"   👁️  Face {index} {tuple(entry['face'])}: left {left_text}  right {right_text}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Locate iris centres inside detected faces",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input", type=str, help="Image file or directory of images")
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument("--output", type=str, help="Annotated output image (or directory for directory input)")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--min-size", type=int, help="Minimum face height in pixels")
    parser.add_argument("--detection-downscale", type=float, help="Resize factor (<1.0) applied before detection")
    parser.add_argument("--verbose", action="store_true", help="Report skipped faces")
    parser.add_argument("--print-config", action="store_true", help="Print the effective configuration before processing")
    parser.add_argument("--show", action="store_true", help="Display the annotated image")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = ConfigManager(args.config)
    if args.min_size is not None:
        config.set("face_detector.min_face_size", args.min_size)
    if args.detection_downscale is not None:
        config.set("face_detector.resize_factor", args.detection_downscale)
    if args.verbose:
        config.set("verbose", True)

    if not config.validate_config():
        return 2

    if args.print_config:
        config.print_config()

    try:
        app = IrisLocatorApp(config)
    except RuntimeError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1

    if os.path.isdir(args.input):
        reports = app.process_directory(args.input, args.output)
    elif os.path.isfile(args.input):
        report = app.process_file(args.input, args.output)
        reports = [report] if report is not None else []
    else:
        print(f"❌ Input not found: {args.input}", file=sys.stderr)
        return 1

    if not reports:
        return 1

    if args.json:
        print(json.dumps(reports if os.path.isdir(args.input) else reports[0], indent=2))
    else:
        for report in reports:
            _print_report(report)

    if args.show and args.output and os.path.isfile(args.output):
        cv2.imshow("Iris Locator", cv2.imread(args.output))
        cv2.waitKey(0)
        cv2.destroyAllWindows()

    return 0


if __name__ == "__main__":
    sys.exit(main())
