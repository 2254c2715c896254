"""
Functional tests that run the CLI in real processes.

An "agent" is a long-lived Python process that invokes the CLI as a child,
so the claim records the agent's pid as the owner.
"""

import json
import os
import shutil
import subprocess
import sys
import tempfile
import textwrap
import time
import unittest
from pathlib import Path

AGENT_SCRIPT = textwrap.dedent(
    """
    import subprocess, sys, time
    store, task_id, agent_id, marker = sys.argv[1:5]
    result = subprocess.run(
        [sys.executable, "-m", "taskclaim", "--store", store, "claim", task_id, agent_id],
        capture_output=True, text=True,
    )
    with open(marker, "w") as f:
        f.write(str(result.returncode))
    time.sleep(120)
    """
)


class TestProcessClaims(unittest.TestCase):

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp(prefix="taskclaim-"))
        self.store = self.test_dir / "task-claims.json"
        self.env = {k: v for k, v in os.environ.items() if not k.startswith("TASKCLAIM_")}
        self.agents = []

    def tearDown(self):
        for agent in self.agents:
            if agent.poll() is None:
                agent.kill()
                agent.wait()
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _run_command(self, command_args, expect_code=0):
        cmd = [sys.executable, "-m", "taskclaim", "--store", str(self.store)] + command_args
        result = subprocess.run(cmd, capture_output=True, text=True, cwd=self.test_dir, env=self.env)
        self.assertEqual(
            result.returncode, expect_code, f"{command_args} -> {result.stdout}{result.stderr}"
        )
        return result

    def _start_agent(self, task_id, agent_id):
        marker = self.test_dir / f"{agent_id}.done"
        agent = subprocess.Popen(
            [sys.executable, "-c", AGENT_SCRIPT, str(self.store), task_id, agent_id, str(marker)],
            cwd=self.test_dir,
            env=self.env,
        )
        self.agents.append(agent)
        deadline = time.time() + 30
        while not marker.exists() or not marker.read_text():
            if time.time() > deadline:
                self.fail(f"agent {agent_id} did not finish claiming")
            time.sleep(0.05)
        self.assertEqual(marker.read_text(), "0")
        return agent

    def _claims(self):
        with open(self.store) as f:
            return json.load(f)["claims"]

    def test_claim_records_agent_process(self):
        agent = self._start_agent("T1", "agent-A")

        claim = self._claims()["T1"]
        self.assertEqual(claim["agentId"], "agent-A")
        self.assertEqual(claim["pid"], agent.pid)

    def test_live_agent_blocks_other_claims(self):
        agent = self._start_agent("T1", "agent-A")

        result = self._run_command(["claim", "T1", "agent-B"], expect_code=1)

        self.assertIn("agent-A", result.stderr)
        self.assertIn(str(agent.pid), result.stderr)
        status = self._run_command(["status", "T1"])
        self.assertIn("actively claimed by agent-A", status.stdout)

    def test_dead_agent_is_taken_over(self):
        agent = self._start_agent("T1", "agent-A")
        agent.kill()
        agent.wait()

        status = self._run_command(["status", "T1"])
        self.assertIn("stale (dead process)", status.stdout)

        result = self._run_command(["claim", "T1", "agent-C"])
        self.assertIn("Took over stale claim from agent-A", result.stdout)
        self.assertEqual(self._claims()["T1"]["agentId"], "agent-C")

    def test_clean_removes_only_dead_agents(self):
        survivor = self._start_agent("T1", "agent-A")
        victim = self._start_agent("T2", "agent-B")
        victim.kill()
        victim.wait()

        result = self._run_command(["clean"])

        self.assertIn("Removed 1 stale claims, 1 remaining", result.stdout)
        self.assertEqual(list(self._claims()), ["T1"])
        self.assertIsNone(survivor.poll())

    def test_release_then_release_again(self):
        self._start_agent("T1", "agent-A")

        self._run_command(["release", "T1"])
        result = self._run_command(["release", "T1"])

        self.assertIn("T1 was not claimed", result.stdout)
        self.assertEqual(self._claims(), {})


if __name__ == "__main__":
    unittest.main()
