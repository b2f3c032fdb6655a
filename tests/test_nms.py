import random
import unittest

from tinyyolo_kit.nms import NMSConfig, iou, nms, suppress
from tinyyolo_kit.types import Candidate, Rect


def _cand(x: float, y: float, w: float, h: float, conf: float, label: str = "dog") -> Candidate:
    return Candidate(rect=Rect(x, y, w, h), confidence=conf, label=label)


class TestIoU(unittest.TestCase):
    def test_identical_boxes(self) -> None:
        r = Rect(10, 20, 30, 40)
        self.assertEqual(iou(r, r), 1.0)

    def test_disjoint_boxes(self) -> None:
        self.assertEqual(iou(Rect(0, 0, 10, 10), Rect(20, 20, 10, 10)), 0.0)

    def test_touching_edges_do_not_overlap(self) -> None:
        self.assertEqual(iou(Rect(0, 0, 10, 10), Rect(10, 0, 10, 10)), 0.0)

    def test_partial_overlap(self) -> None:
        # 5x10 intersection, union 100 + 100 - 50
        self.assertAlmostEqual(iou(Rect(0, 0, 10, 10), Rect(5, 0, 10, 10)), 50.0 / 150.0)

    def test_contained_box(self) -> None:
        self.assertAlmostEqual(iou(Rect(0, 0, 10, 10), Rect(2, 2, 5, 5)), 25.0 / 100.0)

    def test_degenerate_boxes_have_zero_iou(self) -> None:
        other = Rect(0, 0, 10, 10)
        self.assertEqual(iou(Rect(0, 0, 0, 10), other), 0.0)
        self.assertEqual(iou(other, Rect(0, 0, 0, 10)), 0.0)
        self.assertEqual(iou(Rect(0, 0, 0, 0), Rect(0, 0, 0, 0)), 0.0)
        self.assertEqual(iou(Rect(5, 5, -4, -4), other), 0.0)

    def test_symmetric_and_bounded(self) -> None:
        rng = random.Random(7)
        for _ in range(200):
            a = Rect(rng.uniform(0, 400), rng.uniform(0, 400), rng.uniform(1, 150), rng.uniform(1, 150))
            b = Rect(rng.uniform(0, 400), rng.uniform(0, 400), rng.uniform(1, 150), rng.uniform(1, 150))
            self.assertEqual(iou(a, b), iou(b, a))
            self.assertGreaterEqual(iou(a, b), 0.0)
            self.assertLessEqual(iou(a, b), 1.0)
            self.assertAlmostEqual(iou(a, a), 1.0)


class TestSuppress(unittest.TestCase):
    def test_identical_rects_keep_highest(self) -> None:
        low = _cand(10, 10, 50, 50, 0.5)
        high = _cand(10, 10, 50, 50, 0.9)
        kept = suppress([low, high], limit=5, iou_threshold=0.5)
        self.assertEqual(kept, [high])

    def test_disjoint_rects_both_kept_in_confidence_order(self) -> None:
        a = _cand(0, 0, 10, 10, 0.4)
        b = _cand(100, 100, 10, 10, 0.9)
        kept = suppress([a, b], limit=5, iou_threshold=0.99)
        self.assertEqual(kept, [b, a])

    def test_overlap_at_threshold_is_kept(self) -> None:
        # IoU is exactly 1/3; only strictly greater overlaps are removed.
        a = _cand(0, 0, 10, 10, 0.9)
        b = _cand(5, 0, 10, 10, 0.8)
        self.assertEqual(suppress([a, b], limit=5, iou_threshold=1.0 / 3.0), [a, b])
        self.assertEqual(suppress([a, b], limit=5, iou_threshold=0.3), [a])

    def test_limit_caps_results(self) -> None:
        cands = [_cand(i * 20, 0, 10, 10, 0.1 * (i + 1)) for i in range(8)]
        kept = suppress(cands, limit=3, iou_threshold=0.3)
        self.assertEqual([c.confidence for c in kept], [cands[7].confidence, cands[6].confidence, cands[5].confidence])

    def test_suppressed_box_does_not_suppress_others(self) -> None:
        # b overlaps both a and c, but a removes b before b can remove c.
        a = _cand(0, 0, 10, 10, 0.9)
        b = _cand(6, 0, 10, 10, 0.8)
        c = _cand(12, 0, 10, 10, 0.7)
        self.assertEqual(suppress([c, b, a], limit=5, iou_threshold=0.2), [a, c])

    def test_ties_keep_input_order(self) -> None:
        a = _cand(0, 0, 10, 10, 0.6, "cat")
        b = _cand(0, 0, 10, 10, 0.6, "dog")
        self.assertEqual(suppress([a, b], limit=5, iou_threshold=0.5), [a])
        self.assertEqual(suppress([b, a], limit=5, iou_threshold=0.5), [b])

    def test_degenerate_candidates_never_suppress(self) -> None:
        flat = _cand(0, 0, 0, 10, 0.9)
        box = _cand(0, 0, 10, 10, 0.5)
        self.assertEqual(suppress([flat, box], limit=5, iou_threshold=0.0), [flat, box])

    def test_empty_input(self) -> None:
        self.assertEqual(suppress([], limit=5, iou_threshold=0.3), [])

    def test_input_not_modified(self) -> None:
        cands = [_cand(0, 0, 10, 10, 0.2), _cand(1, 1, 10, 10, 0.8)]
        snapshot = list(cands)
        suppress(cands, limit=1, iou_threshold=0.3)
        self.assertEqual(cands, snapshot)

    def test_result_bounds_and_ordering(self) -> None:
        rng = random.Random(3)
        for _ in range(50):
            cands = [
                _cand(rng.uniform(0, 300), rng.uniform(0, 300), rng.uniform(0, 120), rng.uniform(0, 120), rng.random())
                for _ in range(rng.randint(0, 30))
            ]
            limit = rng.randint(1, 10)
            kept = suppress(cands, limit=limit, iou_threshold=rng.random())
            self.assertLessEqual(len(kept), limit)
            self.assertLessEqual(len(kept), len(cands))
            confs = [c.confidence for c in kept]
            self.assertEqual(confs, sorted(confs, reverse=True))

    def test_invalid_arguments_rejected(self) -> None:
        cands = [_cand(0, 0, 10, 10, 0.5)]
        with self.assertRaises(ValueError):
            suppress(cands, limit=0, iou_threshold=0.3)
        with self.assertRaises(ValueError):
            suppress(cands, limit=-1, iou_threshold=0.3)
        with self.assertRaises(ValueError):
            suppress(cands, limit=5, iou_threshold=1.5)
        with self.assertRaises(ValueError):
            suppress(cands, limit=5, iou_threshold=-0.1)

    def test_nms_config_wrapper(self) -> None:
        a = _cand(0, 0, 10, 10, 0.9)
        b = _cand(1, 1, 10, 10, 0.8)
        c = _cand(50, 50, 10, 10, 0.7)
        self.assertEqual(nms([a, b, c], NMSConfig(iou_threshold=0.5, max_detections=1)), [a])
        self.assertEqual(nms([a, b, c], NMSConfig(iou_threshold=0.5, max_detections=5)), [a, c])


if __name__ == "__main__":
    unittest.main()
