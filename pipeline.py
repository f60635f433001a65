"""
PeopleFinder Pipeline

Main script that trains the pedestrian classifier on a directory of ground-truth
silhouettes and classifies the shapes found in test images.
Process: Contour Extraction -> Skeleton Fitting -> Range Training | Classification

Usage:
    python pipeline.py <training_directory> [--test-dir <dir>] [--output <output_dir>] [--visualize]
"""

import cv2
import numpy as np
import sys
import argparse
from pathlib import Path
from typing import List, Sequence

from peoplefinder import (ContourExtractor, PedestrianClassifier, RangeModel,
                          RangeTrainer, SkeletonFit, SkeletonFitter)
from peoplefinder.dataset import load_dataset_files, search_dataset_files
from peoplefinder.visualization import (create_grid_visualization, draw_skeleton,
                                        plot_range_model, render_silhouette)
from config import PipelineConfig


class PeopleFinderPipeline:
    """Training and testing drivers for the pedestrian classifier."""

    def __init__(self):
        """Initialize the fitter, the blob extractor and an untrained classifier."""
        self.fitter = SkeletonFitter()
        self.extractor = ContourExtractor()
        self.classifier = PedestrianClassifier(RangeModel.untrained())
        self.verdicts: List[str] = []
        self.fits: List[SkeletonFit] = []

    @property
    def range_model(self) -> RangeModel:
        return self.classifier.range_model

    @property
    def bad_skeleton_flag(self) -> bool:
        """Failure flag of the most recent fit."""
        return self.fitter.failure_flag

    def fit(self, raster: np.ndarray) -> SkeletonFit:
        """Fit one silhouette with a freshly reset failure flag."""
        self.fitter.reset_failure_flag()
        return self.fitter.fit(raster)

    def train_on_silhouettes(self, silhouettes: Sequence[np.ndarray]) -> RangeModel:
        """
        Learn landmark ranges from ground-truth silhouettes.

        Silhouettes whose skeleton fails are dropped.

        Args:
            silhouettes: Outline rasters, each a positive pedestrian example

        Returns:
            The trained RangeModel, also installed in the classifier
        """
        trainer = RangeTrainer()
        for raster in silhouettes:
            fit = self.fit(raster)
            if not fit.failed:
                trainer.update(fit.skeleton)

        model = trainer.freeze()
        self.classifier = PedestrianClassifier(model)
        return model

    def train(self, training_dir) -> RangeModel:
        """
        Train on every image of a directory.

        A missing directory is reported and leaves an untrained classifier,
        which judges every shape as Noise.
        """
        try:
            image_files = search_dataset_files(training_dir)
        except FileNotFoundError as e:
            print(f"Error: {e}")
            self.classifier = PedestrianClassifier(RangeModel.untrained())
            return self.range_model

        print(f"Found {len(image_files)} training image(s)")
        images = load_dataset_files(image_files)

        print("Training the PeopleFinder classifier... Please Wait...")
        silhouettes = [s for s in (self.extractor.extract_largest(img) for img in images)
                       if s is not None]
        model = self.train_on_silhouettes(silhouettes)

        print(f"Classifier has been trained on {model.sample_count}/{len(images)} silhouette(s)")
        return model

    def test(self, silhouettes: Sequence[np.ndarray]) -> List[str]:
        """
        Classify each silhouette.

        Returns:
            One verdict per input silhouette, in input order
        """
        self.fits = [self.fit(raster) for raster in silhouettes]
        self.verdicts = self.classifier.classify_all([fit.skeleton for fit in self.fits])
        return self.verdicts

    def test_frame(self, frame: np.ndarray) -> List[str]:
        """Classify every shape extracted from a frame."""
        return self.test(self.extractor.extract_all(frame))

    def visualize_results(self, fit: SkeletonFit, label: str = None) -> np.ndarray:
        """
        Render a fitted silhouette with its skeleton.

        Args:
            fit: Result of fit()
            label: Optional text drawn in the corner

        Returns:
            BGR visualization
        """
        vis = draw_skeleton(render_silhouette(fit.silhouette.raster), fit.skeleton)
        if label:
            cv2.putText(vis, label, (3, vis.shape[0] - 5), cv2.FONT_HERSHEY_SIMPLEX,
                        0.35, (255, 255, 255), 1, cv2.LINE_AA)
        return vis

    def demo(self, training_dir, output_path) -> int:
        """
        Fit every training silhouette and save the skeletons as one grid image.

        Returns:
            Number of silhouettes drawn
        """
        images = load_dataset_files(search_dataset_files(training_dir))
        panels, labels = [], []
        for idx, image in enumerate(images, 1):
            raster = self.extractor.extract_largest(image)
            if raster is None:
                continue
            fit = self.fit(raster)
            panels.append(self.visualize_results(fit))
            labels.append(f"#{idx} {'BAD' if fit.failed else 'OK'}")

        if panels:
            cv2.imwrite(str(output_path), create_grid_visualization(panels, labels, cols=8))
        return len(panels)


def main():
    parser = argparse.ArgumentParser(description='PeopleFinder Pedestrian Classifier')
    parser.add_argument('training_dir', type=str, help='Directory of ground-truth silhouette images')
    parser.add_argument('--test-dir', '-t', type=str, help='Directory of images to classify')
    parser.add_argument('--output', '-o', type=str, help='Output directory (default: training_dir/peoplefinder_results)')
    parser.add_argument('--visualize', '-v', action='store_true', help='Save skeleton and range visualizations')

    args = parser.parse_args()

    training_dir = Path(args.training_dir)
    output_dir = Path(args.output) if args.output else training_dir / "peoplefinder_results"

    pipeline = PeopleFinderPipeline()
    model = pipeline.train(training_dir)
    print(model.describe())

    if args.visualize and model.is_trained:
        output_dir.mkdir(exist_ok=True, parents=True)
        plot_range_model(model, output_dir / "landmark_ranges.png")
        n = pipeline.demo(training_dir, output_dir / "training_skeletons.png")
        print(f"Saved {n} training skeleton(s) to: {output_dir}")

    if not args.test_dir:
        return

    test_dir = Path(args.test_dir)
    if not test_dir.exists():
        print(f"Error: Test directory does not exist: {test_dir}")
        sys.exit(1)

    extensions = PipelineConfig.DATASET['IMAGE_EXTENSIONS']
    image_files = sorted(f for f in test_dir.iterdir() if f.is_file() and f.suffix.lower() in extensions)
    print(f"\nFound {len(image_files)} test image(s)\n")

    counts = {}
    for idx, img_path in enumerate(image_files, 1):
        print(f"[{idx}/{len(image_files)}] Processing {img_path.name}...")

        image = cv2.imread(str(img_path))
        if image is None:
            print("  Warning: Could not read image")
            continue

        shapes = pipeline.extractor.extract_all(image)
        verdicts = pipeline.test(shapes)
        for n, verdict in enumerate(verdicts, 1):
            counts[verdict] = counts.get(verdict, 0) + 1
            print(f"  Shape {n}: {verdict}")

        if args.visualize and shapes:
            output_dir.mkdir(exist_ok=True, parents=True)
            panels = [pipeline.visualize_results(f, v) for f, v in zip(pipeline.fits, verdicts)]
            out_path = output_dir / f"{img_path.stem}_skeletons.jpg"
            cv2.imwrite(str(out_path), create_grid_visualization(panels))
            print(f"  Saved: {out_path.name}")

    print("\nSummary: " + ", ".join(f"{v}: {c}" for v, c in sorted(counts.items())))


if __name__ == "__main__":
    main()
