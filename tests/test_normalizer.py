"""엔티티 정규화 테스트 — 키 폴백, 위치 기반 작업 행, 역 이름 보정.

Entity normalizer tests — alternate collection keys, positional task
rows, station-name repair and dropping of malformed elements.
"""

from stationsync.services.normalizer import (
    extract_collection,
    normalize_checklist_submissions,
    normalize_checklist_template,
    normalize_contacts,
    normalize_logs,
    normalize_meetings,
    normalize_tasks,
    normalize_users,
    repair_submission,
)
from tests.conftest import SUBMISSIONS, TASK_ROWS, USERS


class TestCollectionExtraction:
    """컬렉션 키 폴백 테스트."""

    def test_semantic_key(self):
        assert extract_collection({"success": True, "tasks": [1]}, "tasks") == [1]

    def test_generic_key_fallback(self):
        assert extract_collection({"success": True, "data": [2]}, "tasks") == [2]

    def test_semantic_key_wins_over_generic(self):
        body = {"success": True, "tasks": [1], "data": [2]}
        assert extract_collection(body, "tasks") == [1]

    def test_non_list_semantic_key_falls_back(self):
        body = {"success": True, "tasks": None, "data": [2]}
        assert extract_collection(body, "tasks") == [2]

    def test_unsuccessful_body_is_empty(self):
        assert extract_collection({"success": False, "tasks": [1]}, "tasks") == []

    def test_missing_success_flag_is_empty(self):
        assert extract_collection({"tasks": [1]}, "tasks") == []

    def test_truthy_non_boolean_success_is_empty(self):
        assert extract_collection({"success": "true", "tasks": [1]}, "tasks") == []

    def test_malformed_bodies_are_empty(self):
        for body in (None, "oops", 42, [1, 2], {"success": True}):
            assert extract_collection(body, "tasks") == []


class TestTaskRows:
    """위치 기반 작업 행 정규화 테스트."""

    def test_concrete_row(self):
        body = {"success": True, "tasks": [
            ["T1", "忠孝站", "A1", "保養", "2024-05-01", "未完成", "u@x.com", "2024-04-20", ""],
        ]}
        [task] = normalize_tasks(body)
        assert task.uid == "T1"
        assert task.station_name == "忠孝站"
        assert task.station_code == "ZX"
        assert task.item_code == "A1"
        assert task.item_name == "保養"
        assert task.deadline == "2024-05-01"
        assert task.status == "未完成"
        assert task.executor_email == "u@x.com"
        assert task.last_updated == "2024-04-20"
        assert task.attachment_url is None

    def test_station_code_always_from_directory(self):
        """행의 코드 필드(item code)는 역 코드로 쓰이지 않음."""
        tasks = normalize_tasks({"success": True, "tasks": TASK_ROWS})
        assert [t.station_code for t in tasks] == ["ZX", "XY", "ZX"]
        assert all(t.station_code != t.item_code for t in tasks)

    def test_unknown_station_leaves_code_unset(self):
        row = ["T9", "火星站", "A9", "保養", "2024-05-01", "未完成", "", "", ""]
        [task] = normalize_tasks({"success": True, "tasks": [row]})
        assert task.station_name == "火星站"
        assert task.station_code is None

    def test_generic_key(self):
        tasks = normalize_tasks({"success": True, "data": TASK_ROWS})
        assert [t.uid for t in tasks] == ["T1", "T2", "T3"]

    def test_missing_attachment_column(self):
        row = ["T4", "大安站", "A4", "保養", "2024-05-01", "進行中", "a@x.com", "2024-04-20"]
        [task] = normalize_tasks({"success": True, "tasks": [row]})
        assert task.attachment_url is None
        assert task.station_code == "DA"

    def test_numeric_cells_become_text(self):
        row = [101, "忠孝站", 7, "保養", "2024-05-01", "未完成", "", "", ""]
        [task] = normalize_tasks({"success": True, "tasks": [row]})
        assert task.uid == "101"
        assert task.item_code == "7"

    def test_malformed_rows_are_dropped_in_order(self):
        rows = [
            TASK_ROWS[0],
            {"uid": "named"},
            ["T5", "忠孝站"],
            "garbage",
            ["T6", "忠孝站", "A6", "保養", "2024-05-01", "未知狀態", "", "", ""],
            TASK_ROWS[1],
        ]
        tasks = normalize_tasks({"success": True, "tasks": rows})
        assert [t.uid for t in tasks] == ["T1", "T6", "T2"]
        assert tasks[1].status is None

    def test_blank_status_row_is_kept_unset(self):
        row = ["T1", "忠孝站", "A1", "保養", "2024-05-01", "", "", "", ""]
        tasks = normalize_tasks({"success": True, "tasks": [row]})
        assert len(tasks) == 1
        assert tasks[0].uid == "T1"
        assert tasks[0].station_code == "ZX"
        assert tasks[0].status is None

    def test_status_is_trimmed(self):
        row = ["T1", "忠孝站", "A1", "保養", "2024-05-01", " 已完成 ", "", "", ""]
        assert normalize_tasks({"success": True, "tasks": [row]})[0].status == "已完成"

    def test_unsuccessful_body(self):
        assert normalize_tasks({"success": False, "tasks": TASK_ROWS}) == []


class TestSubmissionRepair:
    """체크리스트 제출 역 이름 보정 테스트."""

    def test_name_backfilled_from_directory(self):
        subs = normalize_checklist_submissions({"success": True, "submissions": SUBMISSIONS})
        assert subs[0].station_name == "忠孝站"
        assert subs[1].station_name == "信義站"

    def test_unknown_code_falls_back_to_raw_code(self):
        body = {"success": True, "data": [{"id": "S9", "yearMonth": "2024-05", "stationCode": "QQ"}]}
        [sub] = normalize_checklist_submissions(body)
        assert sub.station_name == "QQ"

    def test_blank_name_is_repaired(self):
        body = {"success": True, "submissions": [
            {"id": "S3", "yearMonth": "2024-05", "stationCode": "MS", "stationName": "  "},
        ]}
        [sub] = normalize_checklist_submissions(body)
        assert sub.station_name == "民生站"

    def test_existing_name_kept(self):
        body = {"success": True, "submissions": [
            {"id": "S4", "yearMonth": "2024-05", "stationCode": "ZX", "stationName": "舊名稱"},
        ]}
        [sub] = normalize_checklist_submissions(body)
        assert sub.station_name == "舊名稱"

    def test_repair_preserves_id_and_results(self):
        [sub] = normalize_checklist_submissions({"success": True, "submissions": SUBMISSIONS[:1]})
        assert sub.id == "S1"
        assert len(sub.results) == 1
        assert sub.results[0].item_id == "I1"
        assert sub.results[0].status == "正常"

    def test_repair_is_idempotent(self):
        subs = normalize_checklist_submissions({"success": True, "submissions": SUBMISSIONS})
        again = normalize_checklist_submissions({
            "success": True,
            "submissions": [s.model_dump(by_alias=True) for s in subs],
        })
        assert again == subs
        assert [repair_submission(s) for s in subs] == subs

    def test_malformed_submission_dropped(self):
        body = {"success": True, "submissions": [
            {"id": "S5"},
            {"id": "S6", "yearMonth": "2024-05", "stationCode": "ZX",
             "results": [{"itemId": "I1", "status": "壞掉"}]},
            SUBMISSIONS[1],
        ]}
        subs = normalize_checklist_submissions(body)
        assert [s.id for s in subs] == ["S6", "S2"]
        assert subs[0].results == []

    def test_null_station_name_is_repaired(self):
        body = {"success": True, "submissions": [
            {"id": "S1", "yearMonth": "2024-05", "stationCode": "ZX", "stationName": None, "results": []},
        ]}
        subs = normalize_checklist_submissions(body)
        assert len(subs) == 1
        assert subs[0].station_name == "忠孝站"

    def test_malformed_result_dropped_submission_kept(self):
        body = {"success": True, "submissions": [
            {"id": "S1", "yearMonth": "2024-05", "stationCode": "ZX",
             "results": [{"itemId": "1", "status": "正常"}, {"itemId": "2", "status": ""}]},
        ]}
        subs = normalize_checklist_submissions(body)
        assert len(subs) == 1
        assert [r.item_id for r in subs[0].results] == ["1"]
        assert subs[0].results[0].status == "正常"


class TestOtherCollections:
    """기타 컬렉션 정규화 테스트."""

    def test_users_bare_list(self):
        users = normalize_users(USERS)
        assert [u.email for u in users] == [u["email"] for u in USERS]
        assert users[1].assigned_station == "ZX"
        assert users[3].force_change_password is True

    def test_users_wrapped(self):
        assert len(normalize_users({"success": True, "users": USERS})) == len(USERS)
        assert len(normalize_users({"success": True, "data": USERS})) == len(USERS)

    def test_users_unknown_role_dropped(self):
        raw = [{"email": "x@x.com", "role": "superuser"}, USERS[0]]
        assert [u.email for u in normalize_users(raw)] == ["admin@x.com"]

    def test_user_digest_never_dumped(self):
        [user] = normalize_users(USERS[:1])
        assert user.password
        assert "password" not in user.model_dump(by_alias=True)

    def test_meetings(self):
        body = {"success": True, "data": [
            {"id": 1, "date": "2024-05-01", "subject": "月會", "summary": "", "createdBy": "a@x.com"},
            {"subject": "no id"},
        ]}
        [meeting] = normalize_meetings(body)
        assert meeting.id == "1"
        assert meeting.created_by == "a@x.com"
        assert meeting.attachment_url is None

    def test_contacts_keep_extra_fields(self):
        body = {"success": True, "contacts": [{"id": "C1", "phone": "02-1234"}, "bad"]}
        [contact] = normalize_contacts(body)
        assert contact.id == "C1"
        assert contact.model_dump()["phone"] == "02-1234"

    def test_logs_actor_alternate_keys(self):
        body = {"success": True, "logs": [
            {"id": "L1", "timestamp": "t1", "user": "a@x.com", "action": "createTask"},
            {"id": "L2", "timestamp": "t2", "actor": "b@x.com", "action": "updateTask"},
        ]}
        logs = normalize_logs(body)
        assert [log.actor for log in logs] == ["a@x.com", "b@x.com"]

    def test_template(self):
        items = normalize_checklist_template({"success": True, "template": [
            {"id": "I1", "category": "消防", "content": "滅火器"},
            {"category": "no id"},
        ]})
        assert [i.id for i in items] == ["I1"]
