import runpy
import traceback

def main():
    try:
        # Equivalent to: python -m corehook.dev.send_test_event
        runpy.run_module("corehook.dev.send_test_event", run_name="__main__")
    except SystemExit:
        raise
    except Exception:
        traceback.print_exc()
        raise SystemExit(1)

if __name__ == "__main__":
    main()
