#!/usr/bin/env python3
"""
Sanity Check for both agent tools.
Runs REAL calls: the local Python interpreter and the live Open-Meteo API.

Tests:
  - execute_code: success, runtime error, timeout
  - get_weather: Tokyo, 3-day default forecast
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from agent_tools.core.config import get_settings
from agent_tools.tools.code_exec import CodeExecutor
from agent_tools.tools.registry import EXECUTE_CODE, GET_WEATHER, create_tools

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class SanityCheckRunner:
    """Run live checks against both tools."""

    def __init__(self):
        self.results = {
            "timestamp": datetime.now().isoformat(),
            "tests": {},
            "errors": [],
        }
        self.tools = {t.name: t for t in create_tools()}

    def run_all(self) -> dict:
        logger.info("=" * 60)
        logger.info("SANITY CHECK - Agent Tools")
        logger.info("=" * 60)

        self._test_code_execution()
        self._test_weather_tool()

        return self.results

    def _test_code_execution(self):
        """Test the execute_code tool."""
        logger.info("\n--- Test: Code Execution ---")

        tool = self.tools.get(EXECUTE_CODE)
        if tool is None:
            self.results["tests"]["code_execution"] = {
                "success": False,
                "error": "Tool disabled",
            }
            return

        valid_code = """
import statistics
data = [23.1, 24.5, 22.8, 25.0]
print(f"Mean: {statistics.mean(data)}")
"""

        try:
            valid_result = tool.invoke({"code": valid_code})
            failing_result = tool.invoke({"code": "1 / 0"})
            timeout_result = CodeExecutor(
                interpreter=get_settings().python_interpreter,
                timeout_seconds=1,
            ).run("import time; time.sleep(5)")

            valid_ok = valid_result.get("exit_code") == 0
            failing_ok = failing_result.get("error") == "script exited with error"
            timeout_ok = "timed out" in timeout_result.get("error", "")

            self.results["tests"]["code_execution"] = {
                "success": valid_ok and failing_ok and timeout_ok,
                "valid_code_executed": valid_ok,
                "runtime_error_reported": failing_ok,
                "timeout_enforced": timeout_ok,
                "valid_output": valid_result.get("stdout", "")[:100],
            }

            if valid_ok and failing_ok and timeout_ok:
                logger.info("Code execution test passed")
            else:
                logger.warning(f"Code execution test issues: {valid_result}")

        except Exception as e:
            logger.error(f"Code execution test failed: {e}")
            self.results["tests"]["code_execution"] = {"success": False, "error": str(e)}
            self.results["errors"].append(f"Code execution test failed: {e}")

    def _test_weather_tool(self):
        """Test the get_weather tool."""
        logger.info("\n--- Test: Weather Tool ---")

        tool = self.tools.get(GET_WEATHER)
        if tool is None:
            self.results["tests"]["weather"] = {"success": False, "error": "Tool disabled"}
            return

        try:
            result = tool.invoke(
                {"latitude": 35.6762, "longitude": 139.6503, "forecast_days": 3}
            )

            success = "error" not in result
            daily = result.get("daily") or {}
            self.results["tests"]["weather"] = {
                "success": success,
                "query": result.get("query"),
                "has_units": result.get("units") is not None,
                "days_returned": len(daily.get("time", [])),
            }

            if success:
                logger.info("Weather tool test passed: Tokyo")
            else:
                logger.warning(f"Weather tool returned error: {result.get('error')}")

        except Exception as e:
            logger.error(f"Weather test failed: {e}")
            self.results["tests"]["weather"] = {"success": False, "error": str(e)}
            self.results["errors"].append(f"Weather test failed: {e}")


def main():
    """Main entry point."""
    runner = SanityCheckRunner()
    results = runner.run_all()

    logger.info("\n" + "=" * 60)
    logger.info("SANITY CHECK COMPLETE")
    logger.info("=" * 60)

    print(json.dumps(results, indent=2))
    print(f"\nTools:")
    print(
        f"  - execute_code: {'PASS' if results['tests'].get('code_execution', {}).get('success') else 'FAIL'}"
    )
    print(
        f"  - get_weather: {'PASS' if results['tests'].get('weather', {}).get('success') else 'FAIL'}"
    )

    if results["errors"]:
        print(f"\nErrors encountered: {len(results['errors'])}")
        for err in results["errors"]:
            print(f"  - {err}")

    return results


if __name__ == "__main__":
    main()
