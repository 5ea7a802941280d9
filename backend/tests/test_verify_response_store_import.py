import os
import runpy


def test_verify_response_store_script_importable():
    root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    script_path = os.path.join(root_dir, "scripts", "verify_response_store.py")
    module_globals = runpy.run_path(script_path)
    assert "build_services" in module_globals
    assert callable(module_globals["main"])
