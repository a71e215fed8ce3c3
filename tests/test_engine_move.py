import unittest
from pathlib import Path

from retropanel.core.actions import JobKind, JobState, Outcome, OverwriteChoice
from retropanel.engine import RENAME_FALLBACK_CROSS_DEVICE, OperationEngine, OperationJob
from tests._support import (
    CountdownCancel,
    FaultyFileSystem,
    RecordingProgress,
    ScriptedPrompt,
    make_drives,
    make_repo_tmpdir,
    open_snapshot,
    write_file,
)


class EngineMoveTests(unittest.TestCase):
    def setUp(self):
        self.tmp = make_repo_tmpdir()
        self.addCleanup(self.tmp.cleanup)
        self.drives = make_drives(self.tmp.name, "C", "D")
        self.c = Path(self.drives["C"])
        self.d = Path(self.drives["D"])
        (self.c / "SRC").mkdir()
        (self.c / "DST").mkdir()
        (self.d / "DST").mkdir()
        self.prompt = ScriptedPrompt()

    def _run(self, fs, names, dest, cancel=None, **engine_kwargs):
        src = open_snapshot(fs, "C:\\SRC")
        for name in names:
            src.select_matching(name)
        job = OperationJob.for_snapshot(JobKind.MOVE, src, open_snapshot(fs, dest))
        engine = OperationEngine(fs, self.prompt, RecordingProgress(), cancel, buffer_size=512, **engine_kwargs)
        return job, engine.move(job)

    def test_same_drive_move_uses_rename(self):
        write_file(self.c / "SRC" / "A.TXT", b"a")
        write_file(self.c / "SRC" / "SUB" / "B.TXT", b"b")
        fs = FaultyFileSystem(self.drives)

        job, result = self._run(fs, ["*.*"], "C:\\DST")

        self.assertEqual(result.outcome, Outcome.OK)
        self.assertEqual(job.state, JobState.DONE)
        self.assertEqual(fs.renames, [("C:\\SRC\\SUB", "C:\\DST\\SUB"), ("C:\\SRC\\A.TXT", "C:\\DST\\A.TXT")])
        self.assertEqual((self.c / "DST" / "SUB" / "B.TXT").read_bytes(), b"b")
        self.assertEqual(list((self.c / "SRC").iterdir()), [])

    def test_rename_failure_falls_back_to_copy_and_delete(self):
        write_file(self.c / "SRC" / "SUB" / "B.TXT", b"b" * 1500)
        fs = FaultyFileSystem(self.drives, fail_rename=True)

        _, result = self._run(fs, ["SUB"], "C:\\DST")

        self.assertEqual(result.outcome, Outcome.OK)
        self.assertEqual(len(fs.renames), 1)
        self.assertEqual((self.c / "DST" / "SUB" / "B.TXT").read_bytes(), b"b" * 1500)
        self.assertFalse((self.c / "SRC" / "SUB").exists())

    def test_strict_fallback_reports_rename_failure(self):
        write_file(self.c / "SRC" / "A.TXT", b"a")
        fs = FaultyFileSystem(self.drives, fail_rename=True)

        _, result = self._run(fs, ["A.TXT"], "C:\\DST", rename_fallback=RENAME_FALLBACK_CROSS_DEVICE)

        self.assertEqual(result.outcome, Outcome.ERROR)
        self.assertTrue((self.c / "SRC" / "A.TXT").exists())
        self.assertFalse((self.c / "DST" / "A.TXT").exists())
        self.assertEqual(self.prompt.alerts[0][0], "Move Error")

    def test_existing_destination_prompts_then_replaces(self):
        write_file(self.c / "SRC" / "A.TXT", b"new")
        write_file(self.c / "DST" / "A.TXT", b"old")
        self.prompt.overwrite_answers = [OverwriteChoice.YES]
        fs = FaultyFileSystem(self.drives)

        _, result = self._run(fs, ["A.TXT"], "C:\\DST", rename_fallback=RENAME_FALLBACK_CROSS_DEVICE)

        self.assertEqual(result.outcome, Outcome.OK)
        self.assertEqual(self.prompt.overwrite_asked, ["A.TXT"])
        self.assertEqual((self.c / "DST" / "A.TXT").read_bytes(), b"new")
        self.assertFalse((self.c / "SRC" / "A.TXT").exists())

    def test_declined_overwrite_leaves_source(self):
        write_file(self.c / "SRC" / "A.TXT", b"new")
        write_file(self.c / "DST" / "A.TXT", b"old")
        fs = FaultyFileSystem(self.drives)

        _, result = self._run(fs, ["A.TXT"], "C:\\DST")

        self.assertEqual(result.entries[0].outcome, Outcome.SKIP)
        self.assertEqual((self.c / "DST" / "A.TXT").read_bytes(), b"old")
        self.assertEqual((self.c / "SRC" / "A.TXT").read_bytes(), b"new")

    def test_cross_drive_move_copies_then_deletes(self):
        write_file(self.c / "SRC" / "SUB" / "DEEP" / "X.TXT", b"x")
        target = write_file(self.c / "SRC" / "RO.TXT", b"r")
        target.chmod(0o444)
        fs = FaultyFileSystem(self.drives)

        _, result = self._run(fs, ["*.*"], "D:\\DST")

        self.assertEqual(result.outcome, Outcome.OK)
        self.assertEqual(fs.renames, [])
        self.assertEqual((self.d / "DST" / "SUB" / "DEEP" / "X.TXT").read_bytes(), b"x")
        self.assertEqual((self.d / "DST" / "RO.TXT").read_bytes(), b"r")
        self.assertEqual(list((self.c / "SRC").iterdir()), [])

    def test_failed_copy_rolls_back_and_keeps_source(self):
        write_file(self.c / "SRC" / "SUB" / "A.TXT", b"a")
        write_file(self.c / "SRC" / "SUB" / "B.TXT", b"b")
        fs = FaultyFileSystem(self.drives, fail_write=["B.TXT"])

        _, result = self._run(fs, ["SUB"], "D:\\DST")

        self.assertEqual(result.outcome, Outcome.ERROR)
        self.assertFalse((self.d / "DST" / "SUB").exists())
        self.assertTrue((self.c / "SRC" / "SUB" / "A.TXT").exists())
        self.assertTrue((self.c / "SRC" / "SUB" / "B.TXT").exists())

    def test_cancelled_move_leaves_no_partial_destination(self):
        write_file(self.c / "SRC" / "SUB" / "A.TXT", b"a")
        write_file(self.c / "SRC" / "SUB" / "B.TXT", b"b")
        fs = FaultyFileSystem(self.drives)

        job, result = self._run(fs, ["SUB"], "D:\\DST", cancel=CountdownCancel(after=3))

        self.assertEqual(result.outcome, Outcome.CANCEL)
        self.assertEqual(job.state, JobState.CANCELLED)
        self.assertFalse((self.d / "DST" / "SUB").exists())
        self.assertEqual(sorted(p.name for p in (self.c / "SRC" / "SUB").iterdir()), ["A.TXT", "B.TXT"])


if __name__ == "__main__":
    unittest.main()
