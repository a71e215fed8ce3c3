import unittest
from pathlib import Path

from retropanel.core.actions import Outcome
from retropanel.core.config import AppConfig
from retropanel.engine import CancelFlag, Commander, OperationEngine
from retropanel.fs import LocalFileSystem
from retropanel.panel import LEFT, RIGHT, Session
from tests._support import ScriptedPrompt, make_drives, make_repo_tmpdir, write_file


class SessionTests(unittest.TestCase):
    def setUp(self):
        self.tmp = make_repo_tmpdir()
        self.addCleanup(self.tmp.cleanup)
        self.drives = make_drives(self.tmp.name, "C", "D")
        self.c = Path(self.drives["C"])
        self.fs = LocalFileSystem(self.drives)

    def test_from_config_restores_panels(self):
        write_file(self.c / "SRC" / "A.TXT")
        config = AppConfig(left_drive="C", left_path="\\SRC", right_drive="D", active_panel=RIGHT,
                           drives=self.drives)
        session = Session.from_config(config, self.fs)
        self.assertEqual(session.left.full_path(), "C:\\SRC")
        self.assertEqual([e.name for e in session.left.entries], ["..", "A.TXT"])
        self.assertEqual(session.right.full_path(), "D:\\")
        self.assertIs(session.active, session.right)
        self.assertIs(session.other, session.left)

    def test_missing_saved_path_falls_back_to_drive_root(self):
        config = AppConfig(left_drive="C", left_path="\\GONE", right_drive="Q", drives=self.drives)
        session = Session.from_config(config, self.fs)
        self.assertEqual(session.left.full_path(), "C:\\")
        self.assertEqual(session.right.count, 0)

    def test_to_config_and_switch(self):
        config = AppConfig(memory_tier="low", drives=self.drives)
        session = Session.from_config(config, self.fs)
        self.assertEqual(session.left.capacity, 256)
        session.switch()
        self.assertEqual(session.active_panel, RIGHT)
        session.active.set_drive("D")
        saved = session.to_config(config)
        self.assertEqual(saved.right_drive, "D")
        self.assertEqual(saved.active_panel, RIGHT)
        self.assertEqual(saved.memory_tier, "low")
        self.assertEqual(saved.drives, self.drives)
        session.switch()
        self.assertEqual(session.active_panel, LEFT)


class CommanderTests(unittest.TestCase):
    def setUp(self):
        self.tmp = make_repo_tmpdir()
        self.addCleanup(self.tmp.cleanup)
        self.drives = make_drives(self.tmp.name, "C", "D")
        self.c = Path(self.drives["C"])
        self.d = Path(self.drives["D"])
        write_file(self.c / "SRC" / "A.TXT", b"a")
        write_file(self.c / "SRC" / "B.TXT", b"b")
        (self.c / "SRC" / "SUB").mkdir()
        (self.d / "DST").mkdir()
        self.fs = LocalFileSystem(self.drives)
        config = AppConfig(left_drive="C", left_path="\\SRC", right_drive="D", right_path="\\DST",
                           drives=self.drives)
        self.session = Session.from_config(config, self.fs)
        self.prompt = ScriptedPrompt()
        self.cancel = CancelFlag()
        self.engine = OperationEngine(self.fs, self.prompt, cancel=self.cancel)
        self.commander = Commander(self.session, self.engine, self.prompt, self.cancel)

    def test_copy_single_entry_confirms_and_refreshes(self):
        self.session.left.select_name("A.TXT")
        self.cancel.request()
        result = self.commander.copy()
        self.assertEqual(self.prompt.confirmations, [("Copy", "Copy A.TXT?")])
        self.assertEqual(result.outcome, Outcome.OK)
        self.assertFalse(self.cancel.requested())
        self.assertEqual([e.name for e in self.session.right.entries], ["..", "A.TXT"])

    def test_copy_selection_uses_count_message(self):
        self.commander.navigate("end")
        self.commander.mark()
        self.commander.navigate("up")
        self.commander.mark()
        self.commander.copy()
        self.assertEqual(self.prompt.confirmations[0][1], "Copy 2 files?")
        self.assertTrue((self.d / "DST" / "A.TXT").exists())
        self.assertTrue((self.d / "DST" / "B.TXT").exists())

    def test_declined_confirmation_does_nothing(self):
        self.prompt.confirm_answer = False
        self.session.left.select_name("A.TXT")
        self.assertIsNone(self.commander.move())
        self.assertTrue((self.c / "SRC" / "A.TXT").exists())
        self.assertFalse((self.d / "DST" / "A.TXT").exists())

    def test_no_targets_means_no_prompt(self):
        self.assertIsNone(self.commander.copy())
        self.assertEqual(self.prompt.confirmations, [])

    def test_move_refreshes_both_panels(self):
        self.session.left.select_name("B.TXT")
        self.commander.move()
        self.assertEqual([e.name for e in self.session.left.entries], ["..", "SUB", "A.TXT"])
        self.assertEqual([e.name for e in self.session.right.entries], ["..", "B.TXT"])

    def test_delete_messages(self):
        self.prompt.confirm_answer = False
        self.session.left.select_name("A.TXT")
        self.commander.delete()
        self.session.left.select_name("SUB")
        self.commander.delete()
        self.session.left.select_matching("*.TXT")
        self.commander.delete()
        self.assertEqual([m for _, m in self.prompt.confirmations],
                         ["Delete file A.TXT?", "Delete directory SUB?", "Delete 2 files?"])

    def test_delete_removes_and_refreshes(self):
        self.session.left.select_name("SUB")
        result = self.commander.delete()
        self.assertEqual(result.outcome, Outcome.OK)
        self.assertEqual([e.name for e in self.session.left.entries], ["..", "A.TXT", "B.TXT"])

    def test_mkdir_asks_for_name(self):
        self.prompt.inputs = ["NEWDIR"]
        result = self.commander.mkdir()
        self.assertEqual(result.outcome, Outcome.OK)
        self.assertEqual(self.prompt.input_requests[0][2], 12)
        self.assertEqual(self.session.left.cursor_entry().name, "NEWDIR")
        self.assertIsNone(self.commander.mkdir())

    def test_rename_offers_current_name(self):
        self.session.left.select_name("A.TXT")
        self.prompt.inputs = ["C.TXT"]
        result = self.commander.rename()
        self.assertEqual(result.outcome, Outcome.OK)
        self.assertEqual(self.prompt.input_requests[0][3], "A.TXT")
        self.assertEqual(self.session.left.cursor_entry().name, "C.TXT")

    def test_rename_on_parent_entry_is_ignored(self):
        self.assertIsNone(self.commander.rename("X.TXT"))
        self.assertEqual(self.prompt.input_requests, [])

    def test_mark_toggles_and_moves_down(self):
        self.session.left.select_name("SUB")
        self.assertTrue(self.commander.mark())
        self.assertEqual(self.session.left.cursor_entry().name, "A.TXT")
        self.assertEqual(self.session.left.selected_count, 1)

    def test_navigation_errors_are_alerted(self):
        self.assertFalse(self.commander.change_drive("Q"))
        self.assertEqual(self.prompt.alerts[0][0], "Drive Error")
        self.assertEqual(self.session.left.full_path(), "C:\\SRC")

        self.session.left.select_name("SUB")
        (self.c / "SRC" / "SUB").rmdir()
        self.assertFalse(self.commander.enter())
        self.assertEqual(self.prompt.alerts[1][0], "Directory Error")

    def test_enter_parent_and_switch(self):
        self.session.left.select_name("SUB")
        self.assertTrue(self.commander.enter())
        self.assertEqual(self.session.left.path, "\\SRC\\SUB")
        self.assertTrue(self.commander.parent())
        self.assertEqual(self.session.left.cursor_entry().name, "SUB")
        self.assertIs(self.commander.switch_panel(), self.session.right)
        self.assertTrue(self.commander.change_drive("c"))
        self.assertEqual(self.session.right.full_path(), "C:\\")


if __name__ == "__main__":
    unittest.main()
