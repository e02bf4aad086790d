"""
=============================================================================
적립식 자동매매 시스템 (DCA Trading System)
=============================================================================

[ 시스템 전체 구조 ]

    run_dca.py (진입점)
         │
         ├── utils/config.py        ← config.yaml 설정 로드 / 환경변수 / 변경 알림
         ├── utils/logger.py        ← 로깅
         │
         ├── data/                  ← 시세 소스 (Streamer 구현체)
         │     ├── binance_file.py    Binance kline JSON 파일
         │     ├── frame_streamer.py  OHLCV DataFrame / CSV / 샘플 데이터
         │     └── kline.py           캔들 → Quote
         │
         ├── strategies/            ← 매매 전략 (시세마다 거래 판단)
         │     └── dca_strategy.py
         │
         └── backtest/runner.py     ← 실행 루프
               │
               ├── data/position.py     ← 보유 수량/현금/통계 장부
               ├── backtest/report.py   ← 거래별 리포트 행 (CSV)
               └── backtest/metrics.py  ← 성과 지표 계산


[ 핵심 타입 (core/) ]

    core/money.py            → 통화 최소 단위 정수 금액, 오차 없는 % 배분
    core/quote.py            → Quote 인터페이스 (symbol, price, time)
    core/streamer.py         → Streamer 추상 클래스
    core/trading_strategy.py → Transaction, TradingStrategy 추상 클래스
    core/errors.py           → DCAError 계층 (ErrorKind로 구분)


[ 데이터 흐름 ]

    1. config.yaml에서 전략 파라미터 / 시세 소스 로드
    2. Streamer가 시세(Quote)를 시간순으로 하나씩 전달
    3. DCAStrategy.process()가 간격/균형/매수/매도 판단 → Transaction 또는 None
    4. Transaction이 있으면 Position에 반영 후 리포트 행 기록
    5. 스트림이 끝나면 metrics.py가 ROI/MDD 등 계산
"""
