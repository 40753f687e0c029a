#!/usr/bin/env python3
import io
import json
import sys
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from fakes import FakeFetcher, commit, listing, utc
from gh_contrib_svg.aggregator import NoRepositoriesError
from gh_contrib_svg.fetcher import FetchError
from gh_contrib_svg.main import main, parse_args, run, run_identifier


class TestParseArgs(unittest.TestCase):

    def parse_error(self, argv):
        with redirect_stderr(io.StringIO()) as err, self.assertRaises(SystemExit):
            parse_args(argv)
        return err.getvalue()

    def test_url_sets_owner_and_repo(self):
        args = parse_args(["https://github.com/acme/rocket.js", "-t", "tok", "-o", "other"])
        self.assertEqual((args.owner, args.repo), ("acme", "rocket.js"))

    def test_url_with_git_suffix(self):
        args = parse_args(["https://github.com/acme/rocket.git", "-t", "tok"])
        self.assertEqual((args.owner, args.repo), ("acme", "rocket"))

    def test_url_with_trailing_path(self):
        args = parse_args(["https://github.com/acme/rocket/tree/main", "-t", "tok"])
        self.assertEqual((args.owner, args.repo), ("acme", "rocket"))

    def test_non_positive_layout_options(self):
        for option in ("--size", "--width", "--count", "--workers"):
            with self.subTest(option=option):
                self.assertIn("must be a positive integer",
                              self.parse_error(["-t", "tok", "-o", "acme", option, "0"]))

    def test_invalid_url(self):
        self.assertIn("Invalid GitHub Repo URL", self.parse_error(["https://example.com/acme", "-t", "tok"]))

    def test_defaults(self):
        args = parse_args(["-t", "tok", "-o", "acme"])
        self.assertEqual((args.size, args.width, args.count, args.workers), (120, 1000, 8, 1))
        self.assertIsNone(args.repo)

    def test_token_from_environment(self):
        with patch.dict("os.environ", {"GITHUB_TOKEN": "from-env"}):
            self.assertEqual(parse_args(["-o", "acme"]).token, "from-env")

    def test_token_required(self):
        with patch.dict("os.environ", {}, clear=True):
            self.assertIn("token is required", self.parse_error(["-o", "acme"]))

    def test_owner_required(self):
        self.assertIn("owner is required", self.parse_error(["-t", "tok"]))

    def test_identifier(self):
        self.assertEqual(run_identifier(parse_args(["-t", "tok", "-o", "acme"])), "contributor_acme")
        self.assertEqual(run_identifier(parse_args(["-t", "tok", "-o", "acme", "-r", "rocket"])),
                         "contributor_rocket")


class TestRun(unittest.TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.out = Path(tmp.name)
        self.fetcher = FakeFetcher(
            repo_pages={"acme": [["acme/rocket", "acme/anvil"]]},
            contributor_pages={
                "acme/rocket": [[listing("alice"), listing("bob")]],
                "acme/anvil": [[listing("zed")]],
            },
            commit_pages={
                "acme/rocket": [[commit("bob", utc(2021, 1, 2)), commit("alice", utc(2021, 1, 1)),
                                 commit("bob", utc(2020, 1, 1))]],
                "acme/anvil": [[commit("zed", utc(2022, 1, 1))]],
            },
            created={"acme/rocket": utc(2020, 1, 1), "acme/anvil": utc(2020, 1, 1)},
        )

    def args(self, *extra):
        return parse_args(["-t", "tok", "-o", "acme", "--output-dir", str(self.out), *extra])

    def test_owner_run_writes_svg_and_seen_list(self):
        ranking = run(self.args("-e", "anvil"), fetcher=self.fetcher)
        self.assertEqual([login for login, _ in ranking], ["alice", "bob"])
        self.assertTrue((self.out / "contributor_acme.svg").exists())
        seen = json.loads((self.out / "contributor_acme.json").read_text(encoding="utf-8"))
        self.assertEqual(seen, ["alice", "bob"])

    def test_single_repo_run(self):
        ranking = run(self.args("-r", "anvil"), fetcher=self.fetcher)
        self.assertEqual([login for login, _ in ranking], ["zed"])
        self.assertEqual(self.fetcher.pages_requested("repos", "acme"), [])
        self.assertTrue((self.out / "contributor_anvil.svg").exists())

    def test_unreachable_repo_aborts_and_keeps_seen_list(self):
        (self.out / "contributor_typo.json").write_text('["alice", "bob"]', encoding="utf-8")
        fetcher = FakeFetcher(failures=[("contributors", "acme/typo", None), ("created", "acme/typo", None)])
        with self.assertRaises(FetchError):
            run(self.args("-r", "typo"), fetcher=fetcher)
        seen = json.loads((self.out / "contributor_typo.json").read_text(encoding="utf-8"))
        self.assertEqual(seen, ["alice", "bob"])
        self.assertFalse((self.out / "contributor_typo.svg").exists())

    def test_no_repositories(self):
        with self.assertRaises(NoRepositoriesError):
            run(self.args(), fetcher=FakeFetcher())

    def test_main_exits_on_fatal_error(self):
        with patch("gh_contrib_svg.main.run", side_effect=NoRepositoriesError("No repos found for acme")), \
                patch("sys.stdout", new_callable=io.StringIO) as out, \
                self.assertRaises(SystemExit) as ctx:
            main(["-t", "tok", "-o", "acme"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("No repos found", out.getvalue())


if __name__ == '__main__':
    unittest.main()
