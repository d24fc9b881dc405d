from src.backend.repository import LeagueRepository


class TestMalformedRowsAreSkipped:
    def test_group_settings_without_group_id(self, backend, repository):
        backend.data["GroupSettings"] += [
            {"id": "s3", "groupId": None, "autoOpenRegistrationEnabled": True},
            {"id": "s4", "groupId": "g4", "dayOfGamePushOffsetMinutes": -30},
        ]

        configs = repository.list_group_settings()

        assert [config.group_id for config in configs] == ["g1", "g2"]

    def test_game_with_unparseable_start(self, backend, repository):
        backend.data["Game"].append(
            {"id": "broken", "groupId": "g1", "startAt": "not-a-date"}
        )

        assert [game.id for game in repository.list_group_games("g1")] == ["game1"]

    def test_user_without_id(self, backend, repository):
        backend.data["User"].append({"phone": "0509999999"})

        users = repository.list_users()

        assert len(users) == 5
        assert all(user.id for user in users)

    def test_member_without_user_id(self, backend, repository):
        backend.data["GroupMember"].append({"id": "m9", "groupId": "g1", "isActive": True})

        members = repository.list_active_members("g1")

        assert [member.user_id for member in members] == ["u1", "u2", "u3"]

    def test_malformed_group(self, backend, repository):
        backend.data["Group"].append({"id": "g9", "name": {"he": "nested"}})

        assert repository.get_group("g9") is None
        assert repository.get_group("g1").name == "Thursday Hold'em"


class TestFlagWrites:
    def test_flags_only_ever_set_true(self, backend):
        repository = LeagueRepository(backend)

        repository.mark_registration_open("game1")
        repository.mark_registration_notified("game1")
        repository.mark_reminder_sent("game1")

        assert backend.updates == [
            ("Game", "game1", {"registrationOpen": True}),
            ("Game", "game1", {"registrationNotificationSent": True}),
            ("Game", "game1", {"reminderSent": True}),
        ]
