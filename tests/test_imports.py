def test_import_classscore_package() -> None:
    import importlib

    module = importlib.import_module("classscore")
    assert module.__version__


def test_import_services_has_no_side_effects() -> None:
    from classscore.services import ClassScoreService

    service = ClassScoreService()
    assert service is not None
