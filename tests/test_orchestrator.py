"""Tests for the automation orchestrator."""

import asyncio

import pytest

from listingstudio.automation import AutomationOrchestrator
from listingstudio.errors import AutomationInterrupted, GenerationError, StoryboardError
from listingstudio.models import AutomationStatus, Project

from fakes import FakeGateway, make_listing, make_scenes, payload_for

STYLE = " cinematic"


def make_orchestrator(gateway: FakeGateway, product_name: str = "", updates: list = None) -> AutomationOrchestrator:
    on_update = updates.append if updates is not None else None
    return AutomationOrchestrator(gateway, product_name=product_name, on_update=on_update, image_style=STYLE)


def progress_steps(updates: list[Project]) -> list[int]:
    steps: list[int] = []
    for project in updates:
        if not steps or steps[-1] != project.progress:
            steps.append(project.progress)
    return steps


class TestRun:
    def test_happy_path(self):
        concepts = [
            "Lifestyle: campers at dusk",
            "Guerrilla: lanterns appear on city benches overnight",
            "Technical: the solar cell up close",
        ]
        gateway = FakeGateway(concepts=concepts)
        updates: list[Project] = []
        orchestrator = make_orchestrator(gateway, updates=updates)

        project = asyncio.run(orchestrator.run("Solar Lantern"))

        assert project.status == AutomationStatus.COMPLETE
        assert project.progress == 100
        assert project.product_name == "Solar Lantern"
        assert project.listing == make_listing()
        assert project.marketing_concepts == concepts
        assert project.selected_concept == concepts[1]
        assert len(project.storyboard) == 5
        for scene in project.storyboard:
            assert scene.start_image == payload_for(scene.start_frame_prompt + STYLE)
            assert scene.end_image == payload_for(scene.end_frame_prompt + STYLE)
            assert not scene.is_generating

        assert progress_steps(updates) == [10, 40, 50, 70, 80, 84, 88, 92, 96, 100]
        assert ("storyboard", "Solar Lantern", concepts[1]) in gateway.calls

    def test_progress_never_decreases(self):
        updates: list[Project] = []
        asyncio.run(make_orchestrator(FakeGateway(), updates=updates).run("Solar Lantern"))
        progress = [project.progress for project in updates]
        assert progress == sorted(progress)

    def test_long_storyboard_progress_stays_in_bounds(self):
        updates: list[Project] = []
        orchestrator = make_orchestrator(FakeGateway(scenes=make_scenes(8)), updates=updates)

        project = asyncio.run(orchestrator.run("Solar Lantern"))

        assert project.progress == 100
        assert all(scene.is_rendered for scene in project.storyboard)
        assert progress_steps(updates) == [10, 40, 50, 70, 80, 84, 88, 92, 96, 99, 100]
        assert [update.status for update in updates if update.progress == 100] == [AutomationStatus.COMPLETE]

    def test_status_sequence(self):
        updates: list[Project] = []
        asyncio.run(make_orchestrator(FakeGateway(), updates=updates).run("Solar Lantern"))

        statuses: list[AutomationStatus] = []
        for project in updates:
            if not statuses or statuses[-1] != project.status:
                statuses.append(project.status)
        assert statuses == [
            AutomationStatus.ANALYZING,
            AutomationStatus.BRAINSTORMING,
            AutomationStatus.STORYBOARDING,
            AutomationStatus.RENDERING,
            AutomationStatus.COMPLETE,
        ]

    def test_frame_prompts_carry_style(self):
        gateway = FakeGateway()
        asyncio.run(make_orchestrator(gateway).run("Solar Lantern"))
        prompts = [call[1] for call in gateway.calls if call[0] == "image"]
        assert len(prompts) == 10
        assert all(prompt.endswith(STYLE) for prompt in prompts)

    def test_without_guerrilla_picks_first_concept(self):
        gateway = FakeGateway()
        project = asyncio.run(make_orchestrator(gateway).run("Solar Lantern"))
        assert project.selected_concept == gateway.concepts[0]

    def test_uses_preselected_product_name(self):
        project = asyncio.run(make_orchestrator(FakeGateway(), product_name="Mug").run())
        assert project.product_name == "Mug"
        assert project.status == AutomationStatus.COMPLETE

    def test_preselected_concept_skips_brainstorming(self):
        gateway = FakeGateway()
        project = asyncio.run(make_orchestrator(gateway).run("Solar Lantern", concept="Unboxing"))

        assert project.selected_concept == "Unboxing"
        assert project.marketing_concepts == ["Unboxing"]
        assert not any(call[0] == "concepts" for call in gateway.calls)

    def test_empty_name_is_ignored(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)

        project = asyncio.run(orchestrator.run("   "))

        assert project.status == AutomationStatus.IDLE
        assert gateway.calls == []

    def test_complete_project_does_not_rerun(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)
        asyncio.run(orchestrator.run("Solar Lantern"))
        calls = len(gateway.calls)

        project = asyncio.run(orchestrator.run("Solar Lantern"))

        assert project.status == AutomationStatus.COMPLETE
        assert len(gateway.calls) == calls

    def test_second_run_while_busy_is_ignored(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)

        async def scenario():
            gateway.listing_gate = asyncio.Event()
            first = asyncio.create_task(orchestrator.run("Solar Lantern"))
            while not gateway.calls:
                await asyncio.sleep(0)

            assert orchestrator.is_busy
            snapshot = await orchestrator.run("Other Product")
            assert snapshot.status == AutomationStatus.ANALYZING
            assert snapshot.product_name == "Solar Lantern"

            gateway.listing_gate.set()
            return await first

        project = asyncio.run(scenario())

        assert project.status == AutomationStatus.COMPLETE
        assert not any(call[1] == "Other Product" for call in gateway.calls)

    def test_reset_allows_second_run(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)
        asyncio.run(orchestrator.run("Solar Lantern"))

        project = orchestrator.reset("Mug")
        assert project == Project(product_name="Mug")

        project = asyncio.run(orchestrator.run())
        assert project.status == AutomationStatus.COMPLETE
        assert ("listing", "Mug") in gateway.calls

    def test_snapshots_are_copies(self):
        orchestrator = make_orchestrator(FakeGateway())
        asyncio.run(orchestrator.run("Solar Lantern"))

        snapshot = orchestrator.project
        snapshot.storyboard[0].start_image = None
        assert orchestrator.project.storyboard[0].start_image is not None


class TestFailures:
    def test_listing_failure_abandons_run(self):
        gateway = FakeGateway(listing_error=GenerationError("quota exceeded"))
        updates: list[Project] = []
        orchestrator = make_orchestrator(gateway, updates=updates)

        with pytest.raises(AutomationInterrupted) as exc_info:
            asyncio.run(orchestrator.run("Solar Lantern"))

        assert exc_info.value.stage == "ANALYZING"
        assert isinstance(exc_info.value.__cause__, GenerationError)
        project = orchestrator.project
        assert (project.status, project.progress) == (AutomationStatus.IDLE, 0)
        assert project.listing is None
        assert project.marketing_concepts == []
        assert updates[-1] == project
        assert not any(call[0] == "storyboard" for call in gateway.calls)

    def test_storyboard_failure_keeps_drafts(self):
        gateway = FakeGateway(storyboard_error=StoryboardError("bad json"))
        orchestrator = make_orchestrator(gateway)

        with pytest.raises(AutomationInterrupted) as exc_info:
            asyncio.run(orchestrator.run("Solar Lantern"))

        assert exc_info.value.stage == "STORYBOARDING"
        project = orchestrator.project
        assert (project.status, project.progress) == (AutomationStatus.IDLE, 0)
        assert project.listing == make_listing()
        assert project.marketing_concepts == gateway.concepts
        assert project.selected_concept == gateway.concepts[0]
        assert project.storyboard == []
        assert not any(call[0] == "image" for call in gateway.calls)

    def test_concepts_failure_abandons_run(self):
        gateway = FakeGateway(concepts_error=GenerationError("concepts unavailable"))
        orchestrator = make_orchestrator(gateway)

        with pytest.raises(AutomationInterrupted) as exc_info:
            asyncio.run(orchestrator.run("Solar Lantern"))

        assert exc_info.value.stage == "ANALYZING"
        project = orchestrator.project
        assert (project.status, project.progress) == (AutomationStatus.IDLE, 0)
        assert project.listing is None
        assert project.marketing_concepts == []
        assert not any(call[0] == "storyboard" for call in gateway.calls)

    def test_timeout_resets_and_allows_rerun(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)

        async def timed_out():
            gateway.listing_gate = asyncio.Event()
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(orchestrator.run("Solar Lantern"), 0.05)

        asyncio.run(timed_out())

        project = orchestrator.project
        assert (project.status, project.progress) == (AutomationStatus.IDLE, 0)
        assert not orchestrator.is_busy

        gateway.listing_gate = None
        project = asyncio.run(orchestrator.run())
        assert project.status == AutomationStatus.COMPLETE

    def test_timeout_while_rendering_clears_generating_flag(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)

        async def timed_out():
            gateway.image_gate = asyncio.Event()
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(orchestrator.run("Solar Lantern"), 0.05)

        asyncio.run(timed_out())

        project = orchestrator.project
        assert (project.status, project.progress) == (AutomationStatus.IDLE, 0)
        assert project.listing is not None
        assert len(project.storyboard) == 5
        assert not any(scene.is_generating for scene in project.storyboard)
        assert orchestrator.reset().status == AutomationStatus.IDLE

    def test_failed_run_can_run_again(self):
        gateway = FakeGateway(listing_error=GenerationError("quota exceeded"))
        orchestrator = make_orchestrator(gateway)
        with pytest.raises(AutomationInterrupted):
            asyncio.run(orchestrator.run("Solar Lantern"))

        gateway.listing_error = None
        project = asyncio.run(orchestrator.run())

        assert project.status == AutomationStatus.COMPLETE

    def test_scene_failure_is_skipped(self):
        gateway = FakeGateway(failing_prompts=("Scene 2 end",))
        updates: list[Project] = []
        orchestrator = make_orchestrator(gateway, updates=updates)

        project = asyncio.run(orchestrator.run("Solar Lantern"))

        assert project.status == AutomationStatus.COMPLETE
        assert project.progress == 100
        failed = project.storyboard[1]
        assert failed.start_image is None
        assert failed.end_image is None
        assert not failed.is_generating
        assert [scene.is_rendered for scene in project.storyboard] == [True, False, True, True, True]
        assert progress_steps(updates) == [10, 40, 50, 70, 80, 84, 88, 92, 96, 100]

    def test_unexpected_error_resets_and_propagates(self):
        gateway = FakeGateway(storyboard_error=RuntimeError("bug"))
        orchestrator = make_orchestrator(gateway)

        with pytest.raises(RuntimeError):
            asyncio.run(orchestrator.run("Solar Lantern"))

        assert orchestrator.project.status == AutomationStatus.IDLE
        assert orchestrator.project.listing is not None


class TestRegenerate:
    def test_regenerates_one_scene(self):
        gateway = FakeGateway()
        updates: list[Project] = []
        orchestrator = make_orchestrator(gateway, updates=updates)
        asyncio.run(orchestrator.run("Solar Lantern"))
        calls = len(gateway.calls)

        project = asyncio.run(orchestrator.regenerate_scene_images(2))

        assert len(gateway.calls) == calls + 2
        assert (project.status, project.progress) == (AutomationStatus.COMPLETE, 100)
        assert project.storyboard[2].is_rendered
        assert not project.storyboard[2].is_generating
        assert any(update.storyboard[2].is_generating for update in updates[-2:])

    def test_failure_keeps_previous_images(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)
        before = asyncio.run(orchestrator.run("Solar Lantern")).storyboard[0]

        gateway.failing_prompts = ("Scene 1 start",)
        project = asyncio.run(orchestrator.regenerate_scene_images(0))

        assert project.storyboard[0].start_image == before.start_image
        assert project.storyboard[0].end_image == before.end_image
        assert not project.storyboard[0].is_generating
        assert project.status == AutomationStatus.COMPLETE

    def test_renders_scene_left_empty_by_run(self):
        gateway = FakeGateway(failing_prompts=("Scene 4 start",))
        orchestrator = make_orchestrator(gateway)
        asyncio.run(orchestrator.run("Solar Lantern"))
        assert not orchestrator.project.storyboard[3].is_rendered

        gateway.failing_prompts = ()
        project = asyncio.run(orchestrator.regenerate_scene_images(3))

        assert project.storyboard[3].is_rendered

    def test_out_of_range_raises(self):
        orchestrator = make_orchestrator(FakeGateway())
        asyncio.run(orchestrator.run("Solar Lantern"))

        with pytest.raises(IndexError):
            asyncio.run(orchestrator.regenerate_scene_images(5))
        with pytest.raises(IndexError):
            asyncio.run(orchestrator.regenerate_scene_images(-1))

    def test_cancelled_regeneration_keeps_images(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)
        before = asyncio.run(orchestrator.run("Solar Lantern")).storyboard[0]

        async def timed_out():
            gateway.image_gate = asyncio.Event()
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(orchestrator.regenerate_scene_images(0), 0.05)

        asyncio.run(timed_out())

        scene = orchestrator.project.storyboard[0]
        assert scene.start_image == before.start_image
        assert scene.end_image == before.end_image
        assert not scene.is_generating
        assert not orchestrator.is_busy

    def test_overlapping_regeneration_is_ignored(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)
        asyncio.run(orchestrator.run("Solar Lantern"))

        async def scenario():
            gateway.image_gate = asyncio.Event()
            first = asyncio.create_task(orchestrator.regenerate_scene_images(1))
            while not orchestrator.project.storyboard[1].is_generating:
                await asyncio.sleep(0)

            calls = len(gateway.calls)
            snapshot = await orchestrator.regenerate_scene_images(1)
            assert len(gateway.calls) == calls
            assert snapshot.storyboard[1].is_generating

            gateway.image_gate.set()
            return await first

        project = asyncio.run(scenario())

        assert project.storyboard[1].is_rendered
        assert not project.storyboard[1].is_generating
        assert sum(1 for call in gateway.calls if call[0] == "image") == 12

    def test_ignored_while_running(self):
        gateway = FakeGateway()
        orchestrator = make_orchestrator(gateway)

        async def scenario():
            gateway.listing_gate = asyncio.Event()
            run = asyncio.create_task(orchestrator.run("Solar Lantern"))
            while not gateway.calls:
                await asyncio.sleep(0)

            snapshot = await orchestrator.regenerate_scene_images(0)
            assert snapshot.status == AutomationStatus.ANALYZING

            gateway.listing_gate.set()
            await run

        asyncio.run(scenario())
        assert sum(1 for call in gateway.calls if call[0] == "image") == 10
