"""Unit tests for GraphSession wiring and model replacement."""

import json

import numpy as np
import pytest

from kgviz.config import Settings
from kgviz.graph import EmptyGraphWarning
from kgviz.session import GraphSession, LoadStatus


class TestLoadSnapshot:
    """Tests for loading and replacing snapshots."""

    def test_load(self, test_settings: Settings, sample_snapshot: dict) -> None:
        """Test a valid snapshot is loaded and drawn."""
        session = GraphSession(config=test_settings)
        result = session.load_snapshot(sample_snapshot)
        assert result.status is LoadStatus.LOADED
        assert result.ok
        assert (result.node_count, result.edge_count) == (2, 1)
        assert [g.node_id for g in session.frame.nodes] == ["a", "b"]

    def test_rejected_keeps_previous_model(self, session: GraphSession) -> None:
        """Test a dangling edge leaves the current graph in place."""
        model = session.model
        result = session.load_snapshot(
            {"nodes": [{"id": "a", "name": "A"}], "edges": [{"source": "a", "target": "z"}]}
        )
        assert result.status is LoadStatus.REJECTED
        assert not result.ok
        assert result.to_dict()["error"]["kind"] == "dangling_edge"
        assert session.model is model
        assert len(session.frame.nodes) == 2

    def test_malformed_rejected(self, session: GraphSession) -> None:
        """Test schema errors are reported, not raised."""
        result = session.load_snapshot({"nodes": [{"id": "x"}]})
        assert result.status is LoadStatus.REJECTED
        assert result.error.kind == "malformed_snapshot"

    def test_non_finite_seed_rejected(self, session: GraphSession) -> None:
        """Test a NaN seed position is rejected and the layout keeps ticking."""
        model = session.model
        snapshot = json.loads(
            '{"nodes": [{"id": "a", "name": "A", "x": NaN, "y": 0}, {"id": "b", "name": "B"}], "edges": []}'
        )
        result = session.load_snapshot(snapshot)
        assert result.status is LoadStatus.REJECTED
        assert result.error.kind == "malformed_snapshot"
        assert session.model is model
        session.tick()
        assert all(np.isfinite(session.simulation.state.x))

    def test_empty_snapshot(self, session: GraphSession) -> None:
        """Test an empty snapshot is accepted with a warning."""
        result = session.load_snapshot({"nodes": [], "edges": []})
        assert result.status is LoadStatus.EMPTY
        assert result.ok
        assert any(isinstance(w, EmptyGraphWarning) for w in result.warnings)
        assert session.frame.is_empty

    def test_replacement_reheats(self, session: GraphSession, tech_snapshot: dict) -> None:
        """Test a replacement starts from the reheat alpha, not from 1."""
        session.run_until_stable()
        session.load_snapshot(tech_snapshot)
        assert session.simulation.alpha == pytest.approx(0.3)
        assert session.simulation.running

    def test_first_load_starts_hot(self, test_settings: Settings, sample_snapshot: dict) -> None:
        """Test the first non-empty model starts at alpha 1."""
        session = GraphSession(config=test_settings)
        session.load_snapshot(sample_snapshot)
        assert session.simulation.alpha == 1.0

    def test_positions_carried_over(self, session: GraphSession) -> None:
        """Test surviving ids keep their positions across a replacement."""
        session.tick(40)
        before = session.simulation.position("a")
        session.load_snapshot(
            {"nodes": [{"id": "a", "name": "AI"}, {"id": "c", "name": "CV"}], "edges": []}
        )
        assert session.simulation.position("a") == before

    def test_viewport_persists(self, session: GraphSession, tech_snapshot: dict) -> None:
        """Test the viewport survives model replacement."""
        session.zoom_in()
        session.pan_by(15, 25)
        session.load_snapshot(tech_snapshot)
        assert session.viewport.scale == pytest.approx(1.5)
        assert session.frame.transform.scale == pytest.approx(1.5)

    def test_filter_reapplied(self, session: GraphSession, tech_snapshot: dict) -> None:
        """Test filter inputs carry over to the new model."""
        session.set_search_term("python")
        session.load_snapshot(tech_snapshot)
        assert {g.node_id for g in session.frame.nodes} == {"py", "psf"}


class TestViewCommands:
    """Tests for zoom, pan and reset commands."""

    def test_zoom_in_out(self, session: GraphSession) -> None:
        """Test zoom buttons use the configured factors around the canvas centre."""
        assert session.zoom_in() == pytest.approx(1.5)
        assert session.zoom_out() == pytest.approx(1.05)
        assert session.viewport.to_model(session.canvas_center) == pytest.approx(session.canvas_center)

    def test_reset_view(self, session: GraphSession) -> None:
        """Test reset restores identity and reheats the layout."""
        session.zoom_in()
        session.pan_by(30, 30)
        session.run_until_stable()
        session.reset_view()
        assert session.viewport.is_identity
        assert session.simulation.alpha == pytest.approx(0.3)
        assert session.simulation.running


class TestFilterAndSelection:
    """Tests for filter and selection commands."""

    def test_search_hides_nodes(self, session: GraphSession) -> None:
        """Test searching "ml" leaves one node and no edges on screen."""
        result = session.set_search_term("ml")
        assert result.node_ids == frozenset({"b"})
        assert [g.node_id for g in session.frame.nodes] == ["b"]
        assert session.frame.edges == ()

    def test_filter_does_not_move_nodes(self, test_settings: Settings, tech_snapshot: dict) -> None:
        """Test hidden nodes stay in the physics so visible positions are unaffected."""
        plain = GraphSession(config=test_settings)
        filtered = GraphSession(config=test_settings)
        plain.load_snapshot(tech_snapshot)
        filtered.load_snapshot(tech_snapshot)
        filtered.set_type_filter(["Technology"])

        plain.tick(50)
        filtered.tick(50)
        np.testing.assert_array_equal(plain.simulation.state.x, filtered.simulation.state.x)
        np.testing.assert_array_equal(plain.simulation.state.y, filtered.simulation.state.y)

    def test_selected_details(self, test_settings: Settings, tech_snapshot: dict) -> None:
        """Test detail-panel data for the selected node."""
        session = GraphSession(config=test_settings)
        session.load_snapshot(tech_snapshot)
        assert session.selected_details() is None
        session.select_node("py")
        details = session.selected_details()
        assert details["name"] == "Python"
        assert details["properties"]["paradigm"] == "object-oriented, functional"
        assert details["neighbors"] == ["gvr", "np", "psf"]
        assert session.frame.node("py").selected

    def test_select_unknown(self, session: GraphSession) -> None:
        """Test selecting an unknown id keeps the current selection."""
        session.select_node("a")
        session.select_node("ghost")
        assert session.controller.selected_node_id == "a"

    def test_pointer_click_selects(self, session: GraphSession) -> None:
        """Test a click on a drawn node selects it."""
        glyph = session.frame.node("b")
        session.pointer_down((glyph.cx, glyph.cy))
        node = session.pointer_up((glyph.cx, glyph.cy))
        assert node is not None and node.id == "b"


class TestOutput:
    """Tests for legend, stats and export."""

    def test_legend(self, session: GraphSession) -> None:
        """Test legend lists the model's types with their colors."""
        legend = session.legend()
        assert [(e.type, e.color) for e in legend] == [
            ("Unknown", "#6B7280"),
            ("Concept", "#F59E0B"),
        ]

    def test_stats(self, session: GraphSession) -> None:
        """Test stats of the two-node graph."""
        stats = session.stats()
        assert stats.total_nodes == 2
        assert stats.total_edges == 1
        assert stats.avg_connections == 0.5
        assert stats.connected_components == 1

    def test_export_image(self, session: GraphSession, tmp_path) -> None:
        """Test export returns the SVG and writes it when given a path."""
        svg = session.export_image(tmp_path / "graph.svg")
        assert "<svg" in svg
        assert (tmp_path / "graph.svg").read_text(encoding="utf-8") == svg


class TestFrameDriven:
    """Tests for host-driven ticking."""

    def test_start_and_pump(self, test_settings: Settings, sample_snapshot: dict, frame_queue) -> None:
        """Test frames run the layout to rest and each tick redraws."""
        session = GraphSession(config=test_settings, request_frame=frame_queue)
        session.load_snapshot(sample_snapshot)
        session.start()
        rendered = session.renderer.frames_rendered
        delivered = frame_queue.pump()
        assert delivered > 0
        assert not session.simulation.running
        assert session.renderer.frames_rendered == rendered + delivered
        assert session.frame.tick == session.simulation.state.ticks

    def test_drag_rearms_frames(self, test_settings: Settings, sample_snapshot: dict, frame_queue) -> None:
        """Test a drag on a settled layout requests frames again."""
        session = GraphSession(config=test_settings, request_frame=frame_queue)
        session.load_snapshot(sample_snapshot)
        session.start()
        frame_queue.pump()

        glyph = session.frame.node("a")
        session.pointer_down((glyph.cx, glyph.cy))
        assert len(frame_queue) == 1
        session.pointer_up((glyph.cx, glyph.cy))
        frame_queue.pump()
        assert not session.simulation.running

    def test_teardown(self, test_settings: Settings, sample_snapshot: dict, frame_queue) -> None:
        """Test teardown makes pending frames no-ops."""
        session = GraphSession(config=test_settings, request_frame=frame_queue)
        session.load_snapshot(sample_snapshot)
        session.start()
        session.teardown()
        frame_queue.pump()
        assert session.simulation.state.ticks == 0
