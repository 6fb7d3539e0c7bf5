"""
Tests for the refinement notice — components/dashboard.py
"""
from conftest import FakeStatsService
from components.dashboard import refinement_notice
from features.refinement_controller import RefinementController


class TestRefinementNotice:
    def test_info_after_relaxation(self, metadata):
        service = FakeStatsService(zero_when=lambda s: s.metric == "valor_mil_reais")
        controller = RefinementController(service, metadata)
        controller.refresh()

        kind, message = refinement_notice(controller)

        assert kind == "info"
        assert "(1x)" in message

    def test_no_notice_for_later_user_query(self, metadata):
        service = FakeStatsService(zero_when=lambda s: s.metric == "valor_mil_reais")
        controller = RefinementController(service, metadata)
        controller.refresh()

        controller.update_filters(region="MG")
        controller.refresh()

        assert controller.attempts == 1
        assert refinement_notice(controller) is None

    def test_no_notice_without_relaxation(self, metadata):
        controller = RefinementController(FakeStatsService(), metadata)
        controller.refresh()
        assert refinement_notice(controller) is None

    def test_warning_when_nothing_found(self, metadata):
        controller = RefinementController(FakeStatsService(zero_when=lambda s: True), metadata)
        controller.refresh()

        kind, _ = refinement_notice(controller)

        assert kind == "warning"
