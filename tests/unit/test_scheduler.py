"""Unit tests for frame-driven tick scheduling."""

from kgviz.graph import GraphModel
from kgviz.layout import ForceSimulation, TickScheduler


class TestTickScheduler:
    """Tests for TickScheduler."""

    def test_one_frame_at_a_time(self, placed_simulation: ForceSimulation, frame_queue) -> None:
        """Test start requests a single frame and repeated starts do not stack."""
        scheduler = TickScheduler(placed_simulation, request_frame=frame_queue)
        scheduler.start()
        scheduler.start()
        assert len(frame_queue) == 1
        assert scheduler.pending

    def test_runs_until_settled(self, placed_simulation: ForceSimulation, frame_queue) -> None:
        """Test pumping frames ticks until alpha falls below alpha_min, then stops asking."""
        scheduler = TickScheduler(placed_simulation, request_frame=frame_queue)
        ticks: list[int] = []
        ended: list[int] = []
        scheduler.subscribe(lambda sim: ticks.append(sim.state.ticks))
        scheduler.subscribe_end(lambda sim: ended.append(sim.state.ticks))

        scheduler.start()
        delivered = frame_queue.pump()

        assert not placed_simulation.running
        assert delivered == len(ticks)
        assert ticks == list(range(1, len(ticks) + 1))
        assert ended == [ticks[-1]]
        assert len(frame_queue) == 0
        assert not scheduler.pending

    def test_reheat_rearms_frames(self, placed_simulation: ForceSimulation, frame_queue) -> None:
        """Test a reheat after settling requests frames again."""
        scheduler = TickScheduler(placed_simulation, request_frame=frame_queue)
        scheduler.start()
        frame_queue.pump()
        requested = frame_queue.requested

        placed_simulation.reheat()
        assert frame_queue.requested == requested + 1
        frame_queue.pump()
        assert not placed_simulation.running

    def test_stop_makes_pending_frame_noop(self, placed_simulation: ForceSimulation, frame_queue) -> None:
        """Test a frame delivered after stop does not tick."""
        scheduler = TickScheduler(placed_simulation, request_frame=frame_queue)
        scheduler.start()
        scheduler.stop()
        frame_queue.pump()
        assert placed_simulation.state.ticks == 0
        assert not scheduler.active

    def test_reheat_while_inactive(self, placed_simulation: ForceSimulation, frame_queue) -> None:
        """Test reheats do not request frames before start."""
        TickScheduler(placed_simulation, request_frame=frame_queue)
        placed_simulation.reheat()
        assert len(frame_queue) == 0

    def test_manual_stepping(self, placed_simulation: ForceSimulation) -> None:
        """Test driving the scheduler without a host."""
        scheduler = TickScheduler(placed_simulation, ticks_per_frame=5)
        assert scheduler.step()
        assert placed_simulation.state.ticks == 5
        ticks = scheduler.run_until_stable(max_ticks=20)
        assert ticks == 20
        assert placed_simulation.running
        scheduler.run_until_stable()
        assert not placed_simulation.running
        assert not scheduler.step()

    def test_max_ticks_not_exceeded(self, placed_simulation: ForceSimulation) -> None:
        """Test max_ticks caps the run even when it is not a multiple of the frame size."""
        scheduler = TickScheduler(placed_simulation, ticks_per_frame=7)
        assert scheduler.run_until_stable(max_ticks=10) == 10
        assert placed_simulation.state.ticks == 10
        assert placed_simulation.running

    def test_counts_ticks_of_settling_frame(self, placed_model: GraphModel) -> None:
        """Test a frame that settles early reports only the ticks it ran."""
        simulation = ForceSimulation(placed_model, alpha_decay=0.9, seed=1)
        scheduler = TickScheduler(simulation, ticks_per_frame=50)
        ticks = scheduler.run_until_stable()
        assert not simulation.running
        assert ticks == simulation.state.ticks
        assert ticks < 50

    def test_attach_switches_simulation(
        self, placed_simulation: ForceSimulation, placed_model: GraphModel, frame_queue
    ) -> None:
        """Test attaching a replacement stops the old simulation and drives the new one."""
        scheduler = TickScheduler(placed_simulation, request_frame=frame_queue)
        scheduler.start()
        replacement = ForceSimulation(placed_model, seed=1)
        scheduler.attach(replacement)
        assert not placed_simulation.running
        frame_queue.pump()
        assert placed_simulation.state.ticks == 0
        assert replacement.state.ticks > 0
        assert not replacement.running
